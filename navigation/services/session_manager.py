"""
Navigation sessions keyed by (user, trip).

Each session bundles a :class:`RouteView`, its :class:`GpsTracker` and the
:class:`PushLocationSource` the tracking endpoints feed. Route results are
persisted into the trip through ``record_route_calculation`` and saved with
the store's debounced autosave.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from core.exceptions import ResourceNotFoundException
from navigation.geocoder import Geocoder, NominatimGeocoder, PlaceSuggester
from navigation.location import PushLocationSource
from navigation.route_view import RouteView
from navigation.routing import OsrmRouter, Router
from navigation.tracker import GpsTracker
from trips.services.storage import TripStore
from trips.services.trip_service import TripService, record_route_calculation

logger = logging.getLogger(__name__)

SessionKey = tuple[str, str]


@dataclass
class NavigationSession:
    user_id: str
    trip_id: str
    view: RouteView
    tracker: GpsTracker
    source: PushLocationSource

    def snapshot(self) -> dict[str, object]:
        return {
            **self.view.snapshot(),
            "tracking": self.tracker.state.value,
            "error": self.tracker.last_error,
        }


class NavigationSessionManager:
    def __init__(
        self,
        trip_store: TripStore,
        *,
        geocoder: Geocoder | None = None,
        router: Router | None = None,
        suggester: PlaceSuggester | None = None,
        refresh_interval: float | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._store = trip_store
        nominatim = NominatimGeocoder() if geocoder is None or suggester is None else None
        self._geocoder = geocoder or nominatim
        self.suggester: PlaceSuggester = suggester or nominatim
        self._router = router or OsrmRouter()
        self._refresh_interval = refresh_interval
        self._clock = clock
        self._sessions: dict[SessionKey, NavigationSession] = {}
        self._background: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, user_id: str, trip_id: str) -> NavigationSession | None:
        return self._sessions.get((user_id, trip_id))

    def open(self, user_id: str, trip_id: str) -> NavigationSession:
        """Return the session for this trip, creating it on first use."""
        session = self.get(user_id, trip_id)
        if session is not None:
            return session

        view = RouteView(
            self._geocoder,
            self._router,
            on_route_calculated=functools.partial(self._persist_route, user_id, trip_id),
        )
        source = PushLocationSource()
        tracker_kwargs = {}
        if self._clock is not None:
            tracker_kwargs["clock"] = self._clock
        tracker = GpsTracker(
            view,
            self._geocoder,
            self._router,
            source,
            refresh_interval=self._refresh_interval,
            **tracker_kwargs,
        )
        session = NavigationSession(user_id, trip_id, view, tracker, source)
        self._sessions[(user_id, trip_id)] = session
        logger.debug("Opened navigation session for trip %s", trip_id)
        return session

    async def _persist_route(
        self,
        user_id: str,
        trip_id: str,
        distance_label: str,
        duration_label: str,
        duration_seconds: float,
        distance_meters: float,
    ) -> None:
        data = await self._store.get(user_id)
        try:
            trip = TripService.get_trip(data, trip_id)
        except ResourceNotFoundException:
            logger.info("Route result for deleted trip %s ignored", trip_id)
            return
        record_route_calculation(
            trip,
            distance_label,
            duration_label,
            duration_seconds,
            distance_meters,
        )
        self._store.schedule_save(user_id)

    def endpoints_changed(
        self,
        user_id: str,
        trip_id: str,
        origin: str,
        destination: str,
    ) -> None:
        """Recompute the route of an open session in the background."""
        session = self.get(user_id, trip_id)
        if session is None:
            return
        task = asyncio.create_task(session.view.set_endpoints(origin, destination))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def close(self, user_id: str, trip_id: str) -> None:
        session = self._sessions.pop((user_id, trip_id), None)
        if session is not None:
            await session.tracker.close()
            session.view.supersede()

    async def close_user(self, user_id: str) -> None:
        for key in [k for k in self._sessions if k[0] == user_id]:
            await self.close(*key)

    async def close_all(self) -> None:
        """Tear down every session without recomputing static routes."""
        for key in list(self._sessions):
            await self.close(*key)
        background = list(self._background)
        for task in background:
            task.cancel()
        if background:
            await asyncio.gather(*background, return_exceptions=True)
        logger.info("Navigation sessions closed")
