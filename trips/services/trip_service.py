"""Business logic for trip records held in a user's AppData."""

from __future__ import annotations

import logging
from datetime import datetime

from core.exceptions import ResourceNotFoundException
from date_utils import get_current_utc_time, to_epoch_millis
from trips.models import AppData, Trip, TripDetails, TripDetailsUpdate

logger = logging.getLogger(__name__)


class TripService:
    """Service class for trip create, select, update and delete operations.

    Every method mutates the given :class:`AppData` in place; persisting it is
    the caller's job (see :class:`trips.services.storage.TripStore`).
    """

    @staticmethod
    def get_trip(data: AppData, trip_id: str) -> Trip:
        """Return the trip with ``trip_id``.

        Raises:
            ResourceNotFoundException: If no such trip exists.
        """
        for trip in data.trips:
            if trip.id == trip_id:
                return trip
        msg = f"Trip {trip_id} not found"
        raise ResourceNotFoundException(msg, {"trip_id": trip_id})

    @staticmethod
    def active_trip(data: AppData) -> Trip | None:
        if data.active_trip_id is None:
            return None
        return next((t for t in data.trips if t.id == data.active_trip_id), None)

    @staticmethod
    def create_trip(data: AppData, now: datetime | None = None) -> Trip:
        """Create an empty trip at the top of the list and make it active."""
        now = now or get_current_utc_time()
        trip = Trip(created_at=to_epoch_millis(now), details=TripDetails())
        data.trips.insert(0, trip)
        data.active_trip_id = trip.id
        logger.info("Created trip %s", trip.id)
        return trip

    @staticmethod
    def delete_trip(data: AppData, trip_id: str) -> None:
        trip = TripService.get_trip(data, trip_id)
        data.trips.remove(trip)
        if data.active_trip_id == trip_id:
            data.active_trip_id = None
        logger.info("Deleted trip %s", trip_id)

    @staticmethod
    def select_trip(data: AppData, trip_id: str) -> Trip:
        trip = TripService.get_trip(data, trip_id)
        data.active_trip_id = trip.id
        return trip

    @staticmethod
    def update_details(data: AppData, trip_id: str, update: TripDetailsUpdate) -> Trip:
        """Apply the fields present in ``update``; absent fields are left alone."""
        trip = TripService.get_trip(data, trip_id)
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if changes:
            trip.details = trip.details.model_copy(update=changes)
        return trip

    @staticmethod
    def reset(data: AppData) -> None:
        """Drop every trip of the user."""
        logger.warning("Resetting %d trips", len(data.trips))
        data.trips.clear()
        data.active_trip_id = None


def record_route_calculation(
    trip: Trip,
    distance_label: str,
    duration_label: str,
    duration_seconds: float,
    distance_meters: float,
    now: datetime | None = None,
) -> TripDetails:
    """Persist one successful route computation into the trip details.

    The total distance is written only when it is not set yet (the first
    calculation of the trip); the remaining distance and the labels are
    overwritten every time, whether the route came from the static view or
    from live tracking.
    """
    now = now or get_current_utc_time()
    details = trip.details
    is_first_calculation = not details.total_distance_value

    details.distance = distance_label
    details.duration = duration_label
    details.duration_value = duration_seconds
    if is_first_calculation:
        details.total_distance_value = distance_meters
    details.remaining_distance_value = distance_meters
    details.last_gps_update = to_epoch_millis(now)
    return details
