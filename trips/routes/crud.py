"""API routes for trip CRUD operations, progress and countdown."""

import logging

from fastapi import APIRouter

from core.api import UserId, api_route
from core.startup import get_navigation, get_trip_store
from date_utils import get_current_utc_time
from trips.models import Trip, TripDetailsUpdate
from trips.progress import countdown, project_progress
from trips.services.trip_service import TripService

logger = logging.getLogger(__name__)
router = APIRouter()


def _trip_payload(trip: Trip) -> dict:
    progress = project_progress(trip.details, get_current_utc_time())
    return {**trip.to_json_dict(), "progress": progress.to_dict()}


@router.get("/api/trips", tags=["Trips API"])
@api_route(logger)
async def list_trips(user_id: UserId):
    """All trips of the caller, newest first, with their progress."""
    data = await get_trip_store().get(user_id)
    return {
        "status": "success",
        "trips": [_trip_payload(trip) for trip in data.trips],
        "activeTripId": data.active_trip_id,
    }


@router.post("/api/trips", tags=["Trips API"], status_code=201)
@api_route(logger)
async def create_trip(user_id: UserId):
    store = get_trip_store()
    data = await store.get(user_id)
    trip = TripService.create_trip(data)
    store.schedule_save(user_id)
    return {"status": "success", "trip": _trip_payload(trip)}


@router.post("/api/trips/reset", tags=["Trips API"])
@api_route(logger)
async def reset_trips(user_id: UserId):
    """Delete every trip of the caller and save immediately."""
    store = get_trip_store()
    await get_navigation().close_user(user_id)
    data = await store.get(user_id)
    TripService.reset(data)
    result = await store.save(user_id, data)
    return {"status": "success", "saved": result.to_dict()}


@router.post("/api/trips/save", tags=["Trips API"])
@api_route(logger)
async def save_trips(user_id: UserId):
    """Save now instead of waiting for the autosave."""
    store = get_trip_store()
    result = await store.save(user_id, await store.get(user_id))
    return {"status": "success", "saved": result.to_dict()}


@router.get("/api/trips/{trip_id}", tags=["Trips API"])
@api_route(logger)
async def get_trip(trip_id: str, user_id: UserId):
    data = await get_trip_store().get(user_id)
    return {"status": "success", "trip": _trip_payload(TripService.get_trip(data, trip_id))}


@router.delete("/api/trips/{trip_id}", tags=["Trips API"])
@api_route(logger)
async def delete_trip(trip_id: str, user_id: UserId):
    store = get_trip_store()
    data = await store.get(user_id)
    TripService.delete_trip(data, trip_id)
    await get_navigation().close(user_id, trip_id)
    store.schedule_save(user_id)
    return {
        "status": "success",
        "message": "Trip deleted successfully",
        "activeTripId": data.active_trip_id,
    }


@router.post("/api/trips/{trip_id}/select", tags=["Trips API"])
@api_route(logger)
async def select_trip(trip_id: str, user_id: UserId):
    store = get_trip_store()
    data = await store.get(user_id)
    TripService.select_trip(data, trip_id)
    store.schedule_save(user_id)
    return {"status": "success", "activeTripId": data.active_trip_id}


@router.patch("/api/trips/{trip_id}/details", tags=["Trips API"])
@api_route(logger)
async def update_trip_details(trip_id: str, update: TripDetailsUpdate, user_id: UserId):
    """Edit origin, destination, start date or notes.

    A changed origin or destination recomputes the route of an open
    navigation session.
    """
    store = get_trip_store()
    data = await store.get(user_id)
    before = TripService.get_trip(data, trip_id).details
    trip = TripService.update_details(data, trip_id, update)
    store.schedule_save(user_id)

    after = trip.details
    if (before.origin, before.destination) != (after.origin, after.destination):
        get_navigation().endpoints_changed(
            user_id,
            trip_id,
            after.origin,
            after.destination,
        )
    return {"status": "success", "trip": _trip_payload(trip)}


@router.get("/api/trips/{trip_id}/progress", tags=["Trips API"])
@api_route(logger)
async def get_trip_progress(trip_id: str, user_id: UserId):
    data = await get_trip_store().get(user_id)
    trip = TripService.get_trip(data, trip_id)
    return project_progress(trip.details, get_current_utc_time()).to_dict()


@router.get("/api/trips/{trip_id}/countdown", tags=["Trips API"])
@api_route(logger)
async def get_trip_countdown(trip_id: str, user_id: UserId):
    data = await get_trip_store().get(user_id)
    trip = TripService.get_trip(data, trip_id)
    return countdown(trip.details.start_date, get_current_utc_time())
