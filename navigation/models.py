"""Value types shared by the geocoder, router, route view and tracker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Coordinate:
    """Geographic point in (latitude, longitude) order."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            msg = f"Latitude out of range: {self.lat}"
            raise ValueError(msg)
        if not -180.0 <= self.lng <= 180.0:
            msg = f"Longitude out of range: {self.lng}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Waypoint:
    """A labelled route endpoint or user pin."""

    coordinate: Coordinate
    label: str

    def to_dict(self) -> dict[str, object]:
        return {**self.coordinate.to_dict(), "label": self.label}


@dataclass(frozen=True)
class RouteSummary:
    distance_meters: float
    duration_seconds: float
    distance_label: str
    duration_label: str


@dataclass(frozen=True)
class RouteStep:
    distance_meters: float
    duration_seconds: float
    road_name: str
    maneuver_type: str
    maneuver_modifier: str | None = None


@dataclass(frozen=True)
class RouteResult:
    """One routed path; geometry and summary always travel together."""

    geometry: tuple[Coordinate, ...]
    summary: RouteSummary
    steps: tuple[RouteStep, ...] = ()


@dataclass(frozen=True)
class PositionFix:
    coordinate: Coordinate
    accuracy: float | None = None


class RouteDisplayStatus(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    READY = "ready"
    FAILED = "failed"


@dataclass
class TrackingSession:
    """State of one live-tracking run.

    ``last_route_refresh_at`` is a monotonic timestamp of the last triggered
    route re-fetch; ``destination_label`` records which destination text the
    cached coordinate was resolved for.
    """

    active: bool = True
    last_fix: Coordinate | None = None
    last_route_refresh_at: float | None = None
    destination_coordinate: Coordinate | None = None
    destination_label: str | None = None
