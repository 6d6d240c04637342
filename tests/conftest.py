import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient
from network_blocker import BLOCKED_HOSTS, install_network_blocker

from core.http.circuit_breaker import nominatim_breaker, osrm_breaker
from core.startup import runtime
from db.models import UserTripsDocument


@pytest.fixture(autouse=True)
def _default_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("FORBIDDEN_HOSTS", ",".join(sorted(BLOCKED_HOSTS)))
    monkeypatch.setenv("NOMINATIM_BASE_URL", "http://nominatim.test")
    monkeypatch.setenv("OSRM_BASE_URL", "http://osrm.test")
    monkeypatch.setenv("GEMINI_BASE_URL", "http://gemini.test")
    monkeypatch.setenv("LOCAL_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    install_network_blocker(monkeypatch)


@pytest.fixture(autouse=True)
def _reset_shared_state():
    osrm_breaker.reset()
    nominatim_breaker.reset()
    runtime.trip_store = None
    runtime.navigation = None
    runtime.assistant = None
    yield
    runtime.trip_store = None
    runtime.navigation = None
    runtime.assistant = None


@pytest.fixture
async def beanie_db():
    client = AsyncMongoMockClient()
    database = client["test_db"]
    await init_beanie(database=database, document_models=[UserTripsDocument])
    return database


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """TestClient on one event loop with offline storage and in-memory map services.

    Yields ``(client, router)``; tests queue route results on ``router``.
    """
    from fastapi.testclient import TestClient

    from app import app
    from navigation.services.session_manager import NavigationSessionManager
    from tests.navigation_fakes import DESTINATION, ORIGIN, FakeClock, FakeGeocoder, FakeRouter
    from trips.services.storage import LocalCache, TripStore

    monkeypatch.setenv("CLOUD_SYNC_DISABLED", "1")
    router = FakeRouter()
    with TestClient(app) as client:
        runtime.trip_store = TripStore(None, LocalCache(tmp_path / "api"), autosave_delay=0)
        runtime.navigation = NavigationSessionManager(
            runtime.trip_store,
            geocoder=FakeGeocoder({"Sao Paulo": ORIGIN, "Rio de Janeiro": DESTINATION}),
            router=router,
            refresh_interval=10.0,
            clock=FakeClock(),
        )
        yield client, router
