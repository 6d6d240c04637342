"""
Live GPS tracking with throttled re-routing.

:class:`GpsTracker` moves a :class:`RouteView` between static and live mode.
While tracking, every position fix moves the user marker at once; a route
from the fix to the destination is requested only when the throttle window
has passed since the previous request (see :func:`route_refresh_due`). The
destination coordinate is resolved once per destination text and cached on
the :class:`TrackingSession`.

Stopping cancels the position watch synchronously and supersedes the view's
generation, so a live route that arrives afterwards is dropped. The static
route is then recomputed.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from enum import Enum

from config import get_route_refresh_interval_seconds
from core.exceptions import DeviceLocationError
from navigation.geocoder import Geocoder
from navigation.location import LocationSource, PositionWatch
from navigation.models import Coordinate, PositionFix, TrackingSession
from navigation.route_view import RouteView
from navigation.routing import Router

logger = logging.getLogger(__name__)


class TrackerState(str, Enum):
    STOPPED = "stopped"
    TRACKING = "tracking"


def route_refresh_due(session: TrackingSession, now: float, interval: float) -> bool:
    """Whether a fix arriving at ``now`` may trigger a route re-fetch."""
    if not session.active:
        return False
    last = session.last_route_refresh_at
    return last is None or now - last >= interval


class GpsTracker:
    """
    Start/stop-able position watcher for one route view.

    Usage:
        tracker = GpsTracker(view, geocoder, router, source)
        if not await tracker.start():
            show(tracker.last_error)
        ...
        await tracker.stop()
    """

    def __init__(
        self,
        view: RouteView,
        geocoder: Geocoder,
        router: Router,
        source: LocationSource,
        *,
        refresh_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._view = view
        self._geocoder = geocoder
        self._router = router
        self._source = source
        self._refresh_interval = (
            get_route_refresh_interval_seconds()
            if refresh_interval is None
            else refresh_interval
        )
        self._clock = clock

        self._session: TrackingSession | None = None
        self._watch: PositionWatch | None = None
        self._task: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()
        self.last_error: str | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> TrackerState:
        return TrackerState.TRACKING if self._session else TrackerState.STOPPED

    @property
    def is_tracking(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> TrackingSession | None:
        return self._session

    # ------------------------------------------------------------------
    # Start / stop
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """Begin tracking; False (with ``last_error`` set) if location is unavailable."""
        if self._session is not None:
            await self.stop(restore=False)

        try:
            watch = self._source.watch()
        except DeviceLocationError as exc:
            self.last_error = exc.message
            logger.warning("GPS tracking not started: %s", exc.message)
            return False

        self.last_error = None
        session = TrackingSession()
        self._session = session
        self._watch = watch
        self._view.enter_live_mode()
        self._task = asyncio.create_task(self._consume(session, watch))
        logger.info("GPS tracking started")
        return True

    async def stop(self, *, restore: bool = True) -> None:
        """Stop tracking and, unless ``restore`` is False, recompute the static route."""
        if self._end_session() is None:
            return
        logger.info("GPS tracking stopped")
        await self._view.leave_live_mode(restore=restore)

    async def close(self) -> None:
        """Tear down without restoring the static route (owner is going away)."""
        await self.stop(restore=False)
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def wait_for_pending(self) -> None:
        """Wait until every in-flight live route request has finished."""
        if self._pending:
            await asyncio.wait(list(self._pending))

    def _end_session(self) -> TrackingSession | None:
        session = self._session
        if session is None:
            return None

        session.active = False
        session.last_fix = None
        session.last_route_refresh_at = None
        session.destination_coordinate = None
        session.destination_label = None
        self._session = None

        if self._watch is not None:
            self._watch.cancel()
            self._watch = None
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()

        self._view.supersede()
        return session

    # ------------------------------------------------------------------
    # Position handling
    # ------------------------------------------------------------------

    async def _consume(self, session: TrackingSession, watch: PositionWatch) -> None:
        try:
            async for fix in watch:
                await self.handle_fix(fix)
        except DeviceLocationError as exc:
            if self._session is not session:
                return
            self.last_error = exc.message
            logger.warning("GPS error, tracking stopped: %s", exc.message)
            self._end_session()
            await self._view.leave_live_mode(restore=True)

    async def handle_fix(self, fix: PositionFix) -> bool:
        """Apply one fix; True when it triggered a route re-fetch."""
        session = self._session
        if session is None or not session.active:
            return False

        session.last_fix = fix.coordinate
        self._view.user_location = fix.coordinate

        if not self._view.destination.strip():
            return False
        now = self._clock()
        if not route_refresh_due(session, now, self._refresh_interval):
            return False

        session.last_route_refresh_at = now
        generation = self._view.supersede()
        task = asyncio.create_task(
            self._refresh_route(session, fix.coordinate, generation),
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _refresh_route(
        self,
        session: TrackingSession,
        origin: Coordinate,
        generation: int,
    ) -> None:
        destination = await self._resolve_destination(session)
        if destination is None:
            logger.info("Live route skipped: destination %r unresolved", self._view.destination)
            return
        if not session.active:
            return

        result = await self._router.route(origin, destination)
        if result is None:
            return
        if not session.active:
            logger.debug("Discarding live route that arrived after tracking stopped")
            return
        await self._view.apply_route(result, generation)

    async def _resolve_destination(self, session: TrackingSession) -> Coordinate | None:
        label = self._view.destination.strip()
        if (
            session.destination_coordinate is not None
            and session.destination_label == label
        ):
            return session.destination_coordinate

        waypoint = self._view.destination_waypoint()
        if waypoint is not None:
            coordinate = waypoint.coordinate
        else:
            coordinate = await self._geocoder.resolve(label)

        if coordinate is not None and session.active:
            session.destination_coordinate = coordinate
            session.destination_label = label
        return coordinate
