"""
OSRM HTTP client utilities.

Centralizes driving route requests against an OSRM instance. Responses are
normalized but keep OSRM's GeoJSON (longitude, latitude) coordinate order.
"""

from __future__ import annotations

import logging
from typing import Any

from config import get_osrm_base_url
from core.exceptions import ExternalServiceException
from core.http.circuit_breaker import osrm_breaker, with_circuit_breaker
from core.http.request import request_json
from core.http.session import get_session

logger = logging.getLogger(__name__)


class OsrmClient:
    def __init__(self, profile: str = "driving") -> None:
        self._base_url = get_osrm_base_url()
        self._profile = profile

    def _route_url(self, coordinates: list[tuple[float, float]]) -> str:
        path = ";".join(f"{lon},{lat}" for lon, lat in coordinates)
        return f"{self._base_url}/route/v1/{self._profile}/{path}"

    @with_circuit_breaker(osrm_breaker)
    async def route(
        self,
        start: tuple[float, float],
        end: tuple[float, float],
    ) -> dict[str, Any]:
        """Request a route between two ``(lon, lat)`` pairs.

        Raises:
            ExternalServiceException: transport failure, non-200 status, or a
                response whose ``code`` is not ``"Ok"`` or has no routes.
        """
        url = self._route_url([start, end])
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "true",
        }
        session = await get_session()
        data = await request_json(
            "GET",
            url,
            session=session,
            params=params,
            service_name="OSRM route",
        )
        if not isinstance(data, dict):
            msg = "OSRM route error: unexpected response"
            raise ExternalServiceException(msg, {"url": url})
        if data.get("code") != "Ok" or not data.get("routes"):
            msg = f"OSRM route error: {data.get('code') or 'no route'}"
            raise ExternalServiceException(
                msg,
                {"url": url, "message": data.get("message")},
            )
        return self._normalize_route_response(data)

    @staticmethod
    def _normalize_route_response(data: dict[str, Any]) -> dict[str, Any]:
        route = data["routes"][0]
        geometry = route.get("geometry") or {}
        coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
        legs = route.get("legs") or []
        steps = (legs[0].get("steps") if legs else None) or []
        return {
            "coordinates": coords if isinstance(coords, list) else [],
            "distance_meters": float(route.get("distance") or 0.0),
            "duration_seconds": float(route.get("duration") or 0.0),
            "steps": [OsrmClient._normalize_step(step) for step in steps],
        }

    @staticmethod
    def _normalize_step(step: dict[str, Any]) -> dict[str, Any]:
        maneuver = step.get("maneuver") or {}
        return {
            "distance_meters": float(step.get("distance") or 0.0),
            "duration_seconds": float(step.get("duration") or 0.0),
            "road_name": step.get("name") or "",
            "maneuver_type": maneuver.get("type") or "",
            "maneuver_modifier": maneuver.get("modifier"),
        }
