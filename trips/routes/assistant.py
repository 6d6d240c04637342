"""API routes for the travel assistant (generated checklist and tips)."""

import logging

from fastapi import APIRouter

from core.api import UserId, api_route
from core.exceptions import ValidationException
from core.startup import get_assistant, get_trip_store
from trips.models import ChecklistSuggestRequest
from trips.services.trip_items_service import ChecklistService
from trips.services.trip_service import TripService

logger = logging.getLogger(__name__)
router = APIRouter()


async def _trip_with_destination(user_id: str, trip_id: str):
    data = await get_trip_store().get(user_id)
    trip = TripService.get_trip(data, trip_id)
    if not trip.details.destination.strip():
        msg = "Set a destination for this trip first"
        raise ValidationException(msg)
    return trip


@router.post("/api/trips/{trip_id}/checklist/suggest", tags=["Assistant API"])
@api_route(logger)
async def suggest_checklist(
    trip_id: str,
    user_id: UserId,
    body: ChecklistSuggestRequest | None = None,
):
    """Append generated packing items for the trip's destination."""
    assistant = get_assistant()
    trip = await _trip_with_destination(user_id, trip_id)
    days = body.days if body else ChecklistSuggestRequest().days
    suggestions = await assistant.generate_smart_checklist(trip.details.destination, days)
    added = ChecklistService.merge_suggestions(trip, suggestions)
    if added:
        get_trip_store().schedule_save(user_id)
    return {"status": "success", "added": [item.to_json_dict() for item in added]}


@router.get("/api/trips/{trip_id}/tips", tags=["Assistant API"])
@api_route(logger)
async def get_travel_tips(trip_id: str, user_id: UserId):
    trip = await _trip_with_destination(user_id, trip_id)
    tips = await get_assistant().generate_travel_tips(trip.details.destination)
    return {"tips": tips}
