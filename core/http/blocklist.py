"""Host block utilities for HTTP clients."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlparse

from config import get_forbidden_hosts

# Public community instances; usable in production but never from tests.
PUBLIC_MAP_HOSTS = frozenset(
    {
        "nominatim.openstreetmap.org",
        "router.project-osrm.org",
    },
)


def is_forbidden_host(url: str, forbidden_hosts: Iterable[str] | None = None) -> bool:
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if not host:
        return False
    if forbidden_hosts is None:
        forbidden_hosts = get_forbidden_hosts()
    forbidden = {item.lower() for item in forbidden_hosts}
    if host in forbidden:
        return True
    return any(host.endswith(f".{item}") for item in forbidden)
