"""
Free-text address resolution.

The route view and tracker depend only on the :class:`Geocoder` protocol.
:class:`NominatimGeocoder` is the production adapter; it never raises to its
caller: a blank query, an empty result set or any service failure all come
back as ``None`` (not found). Failed lookups are not retried.
"""

from __future__ import annotations

import logging
from typing import Protocol

import aiohttp

from core.exceptions import ExternalServiceException
from core.http.circuit_breaker import CircuitOpen
from core.http.nominatim import NominatimClient
from navigation.models import Coordinate

logger = logging.getLogger(__name__)

_SERVICE_ERRORS = (
    ExternalServiceException,
    CircuitOpen,
    aiohttp.ClientError,
    TimeoutError,
    ValueError,
)

MIN_SUGGESTION_QUERY_LENGTH = 3
MAX_SUGGESTIONS = 5


class Geocoder(Protocol):
    async def resolve(self, address: str) -> Coordinate | None: ...


class PlaceSuggester(Protocol):
    async def suggest(self, partial: str) -> list[str]: ...


class NominatimGeocoder:
    """Geocoder and place suggester backed by Nominatim search."""

    def __init__(self, client: NominatimClient | None = None) -> None:
        self._client = client or NominatimClient()

    async def resolve(self, address: str) -> Coordinate | None:
        query = (address or "").strip()
        if not query:
            return None
        try:
            results = await self._client.search_raw(query, limit=1)
        except _SERVICE_ERRORS as exc:
            logger.warning("Geocoding failed for %r: %s", query, exc)
            return None
        except Exception:
            logger.exception("Unexpected geocoding failure for %r", query)
            return None

        if not results:
            logger.info("No geocoding match for %r", query)
            return None
        top = results[0]
        try:
            return Coordinate(lat=float(top["lat"]), lng=float(top["lon"]))
        except (KeyError, TypeError, ValueError):
            logger.warning("Unusable geocoding match for %r: %s", query, top)
            return None

    async def suggest(self, partial: str) -> list[str]:
        """Candidate place names for autocomplete; ``[]`` on short input or failure."""
        query = (partial or "").strip()
        if len(query) < MIN_SUGGESTION_QUERY_LENGTH:
            return []
        try:
            candidates = await self._client.search(query, limit=MAX_SUGGESTIONS)
        except Exception as exc:
            logger.warning("Place suggestions failed for %r: %s", query, exc)
            return []
        return [c["display_name"] for c in candidates if c.get("display_name")]
