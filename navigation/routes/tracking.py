"""API routes for live GPS tracking.

The device streams its position by posting fixes (or a device error) to
``/tracking/fix``; they are delivered to the tracker through the session's
push location source.
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from core.api import UserId, api_route
from core.exceptions import (
    DeviceLocationError,
    DeviceLocationUnavailableError,
    ValidationException,
)
from core.startup import get_navigation, get_trip_store
from navigation.models import Coordinate, PositionFix
from trips.services.trip_service import TripService

logger = logging.getLogger(__name__)
router = APIRouter()


class TrackingStartRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    location_available: bool = True


class PositionReport(BaseModel):
    """A device fix, or a device error when ``error`` is set."""

    lat: float | None = None
    lng: float | None = None
    accuracy: float | None = None
    error: str | None = None


@router.post("/api/trips/{trip_id}/tracking/start", tags=["Navigation API"])
@api_route(logger)
async def start_tracking(
    trip_id: str,
    user_id: UserId,
    body: TrackingStartRequest | None = None,
):
    data = await get_trip_store().get(user_id)
    details = TripService.get_trip(data, trip_id).details
    session = get_navigation().open(user_id, trip_id)

    session.source.available = body.location_available if body else True
    session.view.origin = details.origin
    session.view.destination = details.destination
    if not await session.tracker.start():
        raise DeviceLocationUnavailableError(
            session.tracker.last_error or "Location is not available",
        )
    return session.snapshot()


@router.post("/api/trips/{trip_id}/tracking/stop", tags=["Navigation API"])
@api_route(logger)
async def stop_tracking(trip_id: str, user_id: UserId):
    """Stop tracking and show the static route again."""
    session = get_navigation().get(user_id, trip_id)
    if session is None:
        return {"status": "idle", "tracking": "stopped"}
    await session.tracker.stop()
    return session.snapshot()


@router.post("/api/trips/{trip_id}/tracking/fix", tags=["Navigation API"])
@api_route(logger)
async def report_position(trip_id: str, report: PositionReport, user_id: UserId):
    session = get_navigation().get(user_id, trip_id)
    if session is None or not session.tracker.is_tracking:
        msg = "Tracking is not active for this trip"
        raise DeviceLocationError(msg)

    if report.error:
        session.source.publish_error(report.error)
        return {"status": "accepted", "tracking": session.tracker.state.value}

    if report.lat is None or report.lng is None:
        msg = "A position needs both lat and lng"
        raise ValidationException(msg)
    try:
        coordinate = Coordinate(lat=report.lat, lng=report.lng)
    except ValueError as exc:
        raise ValidationException(str(exc)) from exc

    session.source.publish(PositionFix(coordinate, report.accuracy))
    return {"status": "accepted", "tracking": session.tracker.state.value}
