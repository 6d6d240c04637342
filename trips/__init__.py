"""
Trip management package.

- routes/: API endpoint handlers (CRUD, checklist/expenses/markers, assistant)
- services/: business logic, storage and the travel assistant port
- models.py: trip data and request models
- progress.py: progress projection and countdown
"""

from fastapi import APIRouter

from trips.routes import assistant, crud, items

# Create main router that aggregates all trip-related routes
router = APIRouter()

router.include_router(crud.router, tags=["trips-crud"])
router.include_router(items.router, tags=["trips-items"])
router.include_router(assistant.router, tags=["trips-assistant"])

__all__ = ["router"]
