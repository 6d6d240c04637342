"""
Route display and live GPS tracking.

- geocoder.py / routing.py: ports onto Nominatim and OSRM
- route_view.py: displayed route state (static mode)
- tracker.py: live tracking with throttled re-routing
- services/: per-trip navigation sessions
- routes/: API endpoint handlers
"""

from fastapi import APIRouter

from navigation.routes import places, route, tracking

router = APIRouter()
router.include_router(route.router, tags=["navigation-route"])
router.include_router(tracking.router, tags=["navigation-tracking"])
router.include_router(places.router, tags=["navigation-places"])

__all__ = ["router"]
