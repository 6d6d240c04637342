"""
Driving route lookup.

:class:`OsrmRouter` turns an OSRM response into a :class:`RouteResult`.
OSRM geometry is GeoJSON, i.e. ``[longitude, latitude]`` pairs; this is the
one place where they are flipped into :class:`Coordinate` (lat, lng).
Failures of any kind come back as ``None`` (unavailable).
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import aiohttp

from core.exceptions import ExternalServiceException
from core.http.circuit_breaker import CircuitOpen
from core.http.osrm import OsrmClient
from navigation.formatting import build_summary
from navigation.models import Coordinate, RouteResult, RouteStep

logger = logging.getLogger(__name__)

_SERVICE_ERRORS = (
    ExternalServiceException,
    CircuitOpen,
    aiohttp.ClientError,
    TimeoutError,
    ValueError,
)


class Router(Protocol):
    async def route(self, start: Coordinate, end: Coordinate) -> RouteResult | None: ...


def geometry_from_lonlat(coordinates: list[Any]) -> tuple[Coordinate, ...]:
    """Convert GeoJSON ``[lon, lat]`` pairs into (lat, lng) coordinates."""
    points: list[Coordinate] = []
    for pair in coordinates:
        try:
            lon, lat = float(pair[0]), float(pair[1])
            points.append(Coordinate(lat=lat, lng=lon))
        except (TypeError, ValueError, IndexError):
            continue
    return tuple(points)


def route_result_from_osrm(data: dict[str, Any]) -> RouteResult:
    steps = tuple(
        RouteStep(
            distance_meters=step["distance_meters"],
            duration_seconds=step["duration_seconds"],
            road_name=step["road_name"],
            maneuver_type=step["maneuver_type"],
            maneuver_modifier=step.get("maneuver_modifier"),
        )
        for step in data.get("steps", [])
    )
    return RouteResult(
        geometry=geometry_from_lonlat(data.get("coordinates", [])),
        summary=build_summary(data["distance_meters"], data["duration_seconds"]),
        steps=steps,
    )


class OsrmRouter:
    def __init__(self, client: OsrmClient | None = None) -> None:
        self._client = client or OsrmClient()

    async def route(self, start: Coordinate, end: Coordinate) -> RouteResult | None:
        try:
            data = await self._client.route((start.lng, start.lat), (end.lng, end.lat))
        except _SERVICE_ERRORS as exc:
            logger.warning("Route unavailable %s -> %s: %s", start, end, exc)
            return None
        except Exception:
            logger.exception("Unexpected routing failure %s -> %s", start, end)
            return None
        return route_result_from_osrm(data)
