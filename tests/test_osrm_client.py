from unittest.mock import AsyncMock

import pytest

from core.exceptions import ExternalServiceException
from core.http.osrm import OsrmClient
from tests.http_fakes import FakeResponse, FakeSession

OSRM_OK = {
    "code": "Ok",
    "routes": [
        {
            "distance": 432100.5,
            "duration": 19800.0,
            "geometry": {
                "type": "LineString",
                "coordinates": [[-46.6333, -23.5505], [-44.9, -23.2], [-43.1729, -22.9068]],
            },
            "legs": [
                {
                    "steps": [
                        {
                            "distance": 1200.0,
                            "duration": 90.0,
                            "name": "Avenida Paulista",
                            "maneuver": {"type": "depart", "modifier": "right"},
                        },
                        {
                            "distance": 0.0,
                            "duration": 0.0,
                            "name": "",
                            "maneuver": {"type": "arrive"},
                        },
                    ],
                },
            ],
        },
    ],
}


@pytest.mark.asyncio
async def test_osrm_route_builds_request_and_normalizes(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    session = FakeSession(get_responses=[FakeResponse(json_data=OSRM_OK)])
    monkeypatch.setattr("core.http.osrm.get_session", AsyncMock(return_value=session))

    data = await OsrmClient().route((-46.6333, -23.5505), (-43.1729, -22.9068))

    _, url, kwargs = session.requests[0]
    assert url == "http://osrm.test/route/v1/driving/-46.6333,-23.5505;-43.1729,-22.9068"
    assert kwargs["params"] == {
        "overview": "full",
        "geometries": "geojson",
        "steps": "true",
    }
    assert data["distance_meters"] == 432100.5
    assert data["duration_seconds"] == 19800.0
    # Client keeps GeoJSON order; the router adapter swaps it.
    assert data["coordinates"][0] == [-46.6333, -23.5505]
    assert data["steps"][0] == {
        "distance_meters": 1200.0,
        "duration_seconds": 90.0,
        "road_name": "Avenida Paulista",
        "maneuver_type": "depart",
        "maneuver_modifier": "right",
    }
    assert data["steps"][1]["maneuver_modifier"] is None


@pytest.mark.asyncio
async def test_osrm_non_ok_code_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {"code": "NoRoute", "message": "Impossible route", "routes": []}
    session = FakeSession(get_responses=[FakeResponse(json_data=payload)])
    monkeypatch.setattr("core.http.osrm.get_session", AsyncMock(return_value=session))

    with pytest.raises(ExternalServiceException) as raised:
        await OsrmClient().route((0.0, 0.0), (1.0, 1.0))

    assert "NoRoute" in raised.value.message


@pytest.mark.asyncio
async def test_osrm_http_error_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    session = FakeSession(get_responses=[FakeResponse(status=503, text_data="down")])
    monkeypatch.setattr("core.http.osrm.get_session", AsyncMock(return_value=session))

    with pytest.raises(ExternalServiceException):
        await OsrmClient().route((0.0, 0.0), (1.0, 1.0))
