"""API routes for the route of a trip and its external map link."""

import logging

from fastapi import APIRouter

from core.api import UserId, api_route
from core.exceptions import ValidationException
from core.startup import get_navigation, get_trip_store
from navigation.route_view import build_external_map_url
from trips.services.trip_service import TripService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/trips/{trip_id}/route", tags=["Navigation API"])
@api_route(logger)
async def compute_route(trip_id: str, user_id: UserId):
    """Geocode the trip's origin and destination and fetch the driving route.

    While tracking is active the live route stays in charge and this only
    records the endpoint text.
    """
    data = await get_trip_store().get(user_id)
    details = TripService.get_trip(data, trip_id).details
    session = get_navigation().open(user_id, trip_id)
    await session.view.set_endpoints(details.origin, details.destination)
    return session.snapshot()


@router.get("/api/trips/{trip_id}/route", tags=["Navigation API"])
@api_route(logger)
async def get_route(trip_id: str, user_id: UserId):
    """Current route display state (waypoints, geometry, summary, live position)."""
    data = await get_trip_store().get(user_id)
    TripService.get_trip(data, trip_id)
    return get_navigation().open(user_id, trip_id).snapshot()


@router.get("/api/trips/{trip_id}/route/external", tags=["Navigation API"])
@api_route(logger)
async def get_external_map_link(trip_id: str, user_id: UserId):
    """Directions link for an external map app.

    While tracking, the last live position replaces the typed origin.
    """
    data = await get_trip_store().get(user_id)
    details = TripService.get_trip(data, trip_id).details
    session = get_navigation().get(user_id, trip_id)
    user_location = session.view.user_location if session else None
    url = build_external_map_url(details.origin, details.destination, user_location)
    if url is None:
        raise ValidationException("Origin and destination are required")
    return {"url": url}
