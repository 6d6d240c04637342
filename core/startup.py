"""Shared runtime startup/shutdown utilities and the process-wide services.

Service modules are imported inside the functions: route modules import this
module, and the trips/navigation packages import their routes on package
import.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.http.session import cleanup_session
from db import db_manager

if TYPE_CHECKING:
    from navigation.services.session_manager import NavigationSessionManager
    from trips.services.assistant import TravelAssistantService
    from trips.services.storage import TripStore

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    trip_store: TripStore | None = None
    navigation: NavigationSessionManager | None = None
    assistant: TravelAssistantService | None = None


runtime = Runtime()


def get_trip_store() -> TripStore:
    if runtime.trip_store is None:
        from trips.services.storage import TripStore

        runtime.trip_store = TripStore(cloud=None)
    return runtime.trip_store


def get_navigation() -> NavigationSessionManager:
    if runtime.navigation is None:
        from navigation.services.session_manager import NavigationSessionManager

        runtime.navigation = NavigationSessionManager(get_trip_store())
    return runtime.navigation


def get_assistant() -> TravelAssistantService:
    if runtime.assistant is None:
        from trips.services.assistant import TravelAssistantService, get_assistant_client

        runtime.assistant = TravelAssistantService(get_assistant_client())
    return runtime.assistant


async def initialize_shared_runtime(*, use_cloud: bool = True) -> Runtime:
    """Connect the cloud store (falling back to offline mode) and build services."""
    from navigation.services.session_manager import NavigationSessionManager
    from trips.services.assistant import TravelAssistantService, get_assistant_client
    from trips.services.storage import MongoDocumentStore, TripStore

    cloud = None
    if use_cloud:
        try:
            await db_manager.init_beanie()
            cloud = MongoDocumentStore()
            logger.info("Beanie ODM initialized successfully; cloud sync enabled.")
        except Exception as exc:
            logger.warning("MongoDB unavailable, running with local cache only: %s", exc)

    runtime.trip_store = TripStore(cloud=cloud)
    runtime.navigation = NavigationSessionManager(runtime.trip_store)
    runtime.assistant = TravelAssistantService(get_assistant_client())
    if not runtime.assistant.available:
        logger.info("GEMINI_API_KEY not set; travel assistant disabled.")
    return runtime


async def shutdown_shared_runtime(*, close_http_session: bool = True) -> None:
    """Close navigation sessions, flush pending saves and release connections."""
    if runtime.navigation is not None:
        await runtime.navigation.close_all()
    if runtime.trip_store is not None:
        await runtime.trip_store.flush()
    if close_http_session:
        await cleanup_session()
    await db_manager.cleanup_connections()
    runtime.trip_store = None
    runtime.navigation = None
    runtime.assistant = None
