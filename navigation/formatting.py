"""Human-readable labels for route distance and duration."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from core.constants import METERS_PER_KILOMETER, SECONDS_PER_HOUR, SECONDS_PER_MINUTE
from navigation.models import RouteSummary


def format_distance(distance_meters: float) -> str:
    """Kilometres with one decimal, e.g. ``123456`` -> ``"123.5 km"``."""
    km = Decimal(str(distance_meters)) / Decimal(str(METERS_PER_KILOMETER))
    return f"{km.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)} km"


def format_duration(duration_seconds: float) -> str:
    """``"Hh Mmin"``, or ``"Mmin"`` under one hour; partial minutes are dropped."""
    total = int(max(duration_seconds, 0))
    hours = total // SECONDS_PER_HOUR
    minutes = (total % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE
    if hours > 0:
        return f"{hours}h {minutes}min"
    return f"{minutes}min"


def build_summary(distance_meters: float, duration_seconds: float) -> RouteSummary:
    return RouteSummary(
        distance_meters=distance_meters,
        duration_seconds=duration_seconds,
        distance_label=format_distance(distance_meters),
        duration_label=format_duration(duration_seconds),
    )
