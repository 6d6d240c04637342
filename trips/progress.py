"""
Trip progress projection and countdown.

Both are pure functions of the trip fields and ``now``; nothing here is
persisted. GPS-derived distances take precedence over the schedule
(start date plus estimated duration), which takes precedence over a merely
planned route.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from config import get_arrival_threshold_meters
from core.constants import SECONDS_PER_HOUR, SECONDS_PER_MINUTE
from date_utils import parse_timestamp
from trips.models import TripDetails

SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


class TripStatus(str, Enum):
    NOT_STARTED = "NotStarted"
    WAITING = "Waiting"
    EN_ROUTE_GPS = "EnRouteGPS"
    ARRIVING = "Arriving"
    EN_ROUTE_SCHEDULED = "EnRouteScheduled"
    COMPLETED = "Completed"
    PLANNED = "Planned"


@dataclass(frozen=True)
class TripProgress:
    progress_percent: float
    status: TripStatus

    @property
    def using_gps(self) -> bool:
        return self.status in (TripStatus.EN_ROUTE_GPS, TripStatus.ARRIVING)

    def to_dict(self) -> dict[str, object]:
        return {
            "progress": self.progress_percent,
            "status": self.status.value,
            "usingGps": self.using_gps,
        }


def _clamp_percent(value: float) -> float:
    return min(100.0, max(0.0, value))


def project_progress(
    details: TripDetails,
    now: datetime,
    *,
    arrival_threshold_meters: float | None = None,
) -> TripProgress:
    """Completion percentage in [0, 100] and a status label for one trip."""
    threshold = (
        get_arrival_threshold_meters()
        if arrival_threshold_meters is None
        else arrival_threshold_meters
    )
    total = details.total_distance_value
    remaining = details.remaining_distance_value

    if total is not None and remaining is not None and total > 0:
        if remaining < threshold:
            return TripProgress(100.0, TripStatus.ARRIVING)
        traveled = total - remaining
        return TripProgress(
            _clamp_percent(traveled / total * 100),
            TripStatus.EN_ROUTE_GPS,
        )

    start = parse_timestamp(details.start_date)
    if start is not None and details.duration_value:
        end = start + timedelta(seconds=details.duration_value)
        now = parse_timestamp(now)
        if now < start:
            return TripProgress(0.0, TripStatus.WAITING)
        if now > end:
            return TripProgress(100.0, TripStatus.COMPLETED)
        elapsed = (now - start).total_seconds()
        return TripProgress(
            _clamp_percent(elapsed / details.duration_value * 100),
            TripStatus.EN_ROUTE_SCHEDULED,
        )

    if details.distance:
        return TripProgress(0.0, TripStatus.PLANNED)
    return TripProgress(0.0, TripStatus.NOT_STARTED)


def countdown(start_date: str | None, now: datetime) -> dict[str, int]:
    """Days/hours/minutes/seconds until ``start_date``; all zero once it has passed."""
    zero = {"days": 0, "hours": 0, "minutes": 0, "seconds": 0}
    start = parse_timestamp(start_date)
    if start is None:
        return zero

    remaining = int((start - parse_timestamp(now)).total_seconds())
    if remaining <= 0:
        return zero
    return {
        "days": remaining // SECONDS_PER_DAY,
        "hours": (remaining % SECONDS_PER_DAY) // SECONDS_PER_HOUR,
        "minutes": (remaining % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE,
        "seconds": remaining % SECONDS_PER_MINUTE,
    }
