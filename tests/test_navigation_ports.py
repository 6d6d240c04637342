from unittest.mock import AsyncMock

import aiohttp
import pytest

from core.exceptions import ExternalServiceException
from core.http.circuit_breaker import CircuitOpen
from navigation.geocoder import NominatimGeocoder
from navigation.models import Coordinate
from navigation.routing import OsrmRouter, geometry_from_lonlat


def _nominatim(raw=None, normalized=None, error=None):
    client = AsyncMock()
    if error is not None:
        client.search_raw.side_effect = error
        client.search.side_effect = error
    else:
        client.search_raw.return_value = raw or []
        client.search.return_value = normalized or []
    return client


@pytest.mark.asyncio
async def test_resolve_takes_top_match() -> None:
    client = _nominatim(raw=[{"lat": "-22.9068", "lon": "-43.1729"}, {"lat": "1", "lon": "2"}])

    result = await NominatimGeocoder(client).resolve("  Rio de Janeiro ")

    assert result == Coordinate(lat=-22.9068, lng=-43.1729)
    client.search_raw.assert_awaited_once_with("Rio de Janeiro", limit=1)


@pytest.mark.asyncio
@pytest.mark.parametrize("address", ["", "   ", None])
async def test_resolve_blank_input_makes_no_call(address) -> None:
    client = _nominatim()

    assert await NominatimGeocoder(client).resolve(address) is None
    client.search_raw.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ExternalServiceException("Nominatim search error: 500"),
        CircuitOpen("Nominatim", 30.0),
        aiohttp.ClientConnectionError("refused"),
        TimeoutError(),
    ],
)
async def test_resolve_service_failure_is_not_found(error) -> None:
    client = _nominatim(error=error)

    assert await NominatimGeocoder(client).resolve("Rio") is None
    assert client.search_raw.await_count == 1


@pytest.mark.asyncio
async def test_resolve_empty_result_is_not_found() -> None:
    assert await NominatimGeocoder(_nominatim(raw=[])).resolve("Nowhere") is None


@pytest.mark.asyncio
async def test_suggest_short_input_skips_lookup() -> None:
    client = _nominatim()

    assert await NominatimGeocoder(client).suggest("Ri") == []
    client.search.assert_not_called()


@pytest.mark.asyncio
async def test_suggest_returns_display_names() -> None:
    client = _nominatim(
        normalized=[
            {"display_name": "Rio de Janeiro, Brazil"},
            {"display_name": "Rio Branco, Brazil"},
            {"display_name": ""},
        ],
    )

    names = await NominatimGeocoder(client).suggest("Rio")

    assert names == ["Rio de Janeiro, Brazil", "Rio Branco, Brazil"]
    client.search.assert_awaited_once_with("Rio", limit=5)


@pytest.mark.asyncio
async def test_suggest_failure_returns_empty() -> None:
    client = _nominatim(error=ExternalServiceException("down"))

    assert await NominatimGeocoder(client).suggest("Rio de") == []


def test_geometry_is_swapped_to_lat_lng() -> None:
    geometry = geometry_from_lonlat([[-43.1729, -22.9068], [-46.6333, -23.5505]])

    assert geometry == (
        Coordinate(lat=-22.9068, lng=-43.1729),
        Coordinate(lat=-23.5505, lng=-46.6333),
    )


@pytest.mark.asyncio
async def test_router_swaps_coordinates_both_ways() -> None:
    client = AsyncMock()
    client.route.return_value = {
        "coordinates": [[-46.6333, -23.5505], [-43.1729, -22.9068]],
        "distance_meters": 432100.0,
        "duration_seconds": 5400.0,
        "steps": [
            {
                "distance_meters": 100.0,
                "duration_seconds": 10.0,
                "road_name": "Rua A",
                "maneuver_type": "turn",
                "maneuver_modifier": "left",
            },
        ],
    }
    start = Coordinate(lat=-23.5505, lng=-46.6333)
    end = Coordinate(lat=-22.9068, lng=-43.1729)

    result = await OsrmRouter(client).route(start, end)

    client.route.assert_awaited_once_with((-46.6333, -23.5505), (-43.1729, -22.9068))
    assert result.geometry[0] == start
    assert result.geometry[-1] == end
    assert all(-90 <= point.lat <= 90 for point in result.geometry)
    assert result.summary.distance_label == "432.1 km"
    assert result.summary.duration_label == "1h 30min"
    assert result.steps[0].road_name == "Rua A"
    assert result.steps[0].maneuver_modifier == "left"


@pytest.mark.asyncio
async def test_router_failure_is_unavailable() -> None:
    client = AsyncMock()
    client.route.side_effect = ExternalServiceException("OSRM route error: NoRoute")

    result = await OsrmRouter(client).route(Coordinate(0, 0), Coordinate(1, 1))

    assert result is None
    assert client.route.await_count == 1
