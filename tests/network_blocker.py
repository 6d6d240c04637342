from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.http.blocklist import PUBLIC_MAP_HOSTS, is_forbidden_host

if TYPE_CHECKING:
    import pytest

BLOCKED_HOSTS = frozenset(PUBLIC_MAP_HOSTS | {"generativelanguage.googleapis.com"})


def _is_blocked_url(url: str) -> bool:
    return is_forbidden_host(url, BLOCKED_HOSTS)


def install_network_blocker(monkeypatch: pytest.MonkeyPatch) -> None:
    import aiohttp
    import httpx

    async def _httpx_block(
        self,
        method: str,
        url: str,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        if _is_blocked_url(str(url)):
            msg = f"Blocked external host: {url}"
            raise RuntimeError(msg)
        return await _orig_httpx_request(self, method, url, *args, **kwargs)

    def _aiohttp_block(self, method: str, url: str, *args: Any, **kwargs: Any) -> Any:
        if _is_blocked_url(str(url)):
            msg = f"Blocked external host: {url}"
            raise RuntimeError(msg)
        return _orig_aiohttp_request(self, method, url, *args, **kwargs)

    _orig_httpx_request = httpx.AsyncClient.request
    monkeypatch.setattr(httpx.AsyncClient, "request", _httpx_block, raising=True)

    _orig_aiohttp_request = aiohttp.ClientSession._request
    monkeypatch.setattr(aiohttp.ClientSession, "_request", _aiohttp_block, raising=True)
