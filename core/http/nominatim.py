"""
Nominatim HTTP client utilities.

Centralizes forward geocoding (place search) against a Nominatim instance.
"""

from __future__ import annotations

import logging
from typing import Any

from config import get_nominatim_search_url, get_nominatim_user_agent
from core.exceptions import ExternalServiceException
from core.http.circuit_breaker import nominatim_breaker, with_circuit_breaker
from core.http.request import request_json
from core.http.session import get_session

logger = logging.getLogger(__name__)


class NominatimClient:
    def __init__(self) -> None:
        self._search_url = get_nominatim_search_url()
        self._user_agent = get_nominatim_user_agent()

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent}

    @with_circuit_breaker(nominatim_breaker)
    async def search_raw(
        self,
        query: str,
        *,
        limit: int = 1,
        addressdetails: bool = False,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "q": query,
            "format": "json",
            "limit": limit,
        }
        if addressdetails:
            params["addressdetails"] = 1

        session = await get_session()
        results = await request_json(
            "GET",
            self._search_url,
            session=session,
            params=params,
            headers=self._headers(),
            service_name="Nominatim search",
        )
        if not isinstance(results, list):
            msg = "Nominatim search error: unexpected response"
            raise ExternalServiceException(msg, {"url": self._search_url})
        return results

    async def search(self, query: str, *, limit: int = 5) -> list[dict[str, Any]]:
        """Search places and normalize candidates.

        Nominatim returns ``lat``/``lon`` as numeric strings; candidates whose
        coordinates do not parse are dropped.
        """
        results = await self.search_raw(query, limit=limit, addressdetails=True)
        candidates: list[dict[str, Any]] = []
        for result in results:
            try:
                lat = float(result["lat"])
                lon = float(result["lon"])
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping Nominatim result without coordinates: %s", result)
                continue
            candidates.append(
                {
                    "place_id": result.get("place_id"),
                    "display_name": result.get("display_name", ""),
                    "lat": lat,
                    "lon": lon,
                    "type": result.get("type"),
                    "address": result.get("address", {}),
                },
            )
        return candidates
