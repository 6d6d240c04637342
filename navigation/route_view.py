"""
Route display state for one trip.

The view owns what a map would show: the resolved endpoint waypoints, the
current route (geometry and summary replaced together as one
:class:`RouteResult`), the live user position and a loading flag.

Static mode runs ``Idle -> Resolving -> Ready | Failed`` whenever the origin
or destination text changes. Live mode is driven by
:class:`navigation.tracker.GpsTracker`, which feeds routes through
:meth:`RouteView.apply_route`.

Every computation is tagged with a generation number taken from
:meth:`RouteView.supersede`; results whose generation is no longer current
are dropped, so a slow response can never overwrite newer state.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote, urlencode

from navigation.geocoder import Geocoder
from navigation.models import (
    Coordinate,
    RouteDisplayStatus,
    RouteResult,
    RouteStep,
    RouteSummary,
    Waypoint,
)
from navigation.routing import Router

logger = logging.getLogger(__name__)

# (distance_label, duration_label, duration_seconds, distance_meters)
OnRouteCalculated = Callable[[str, str, float, float], Awaitable[None] | None]

REMAINING_SUFFIX = " (remaining)"
EXTERNAL_DIRECTIONS_URL = "https://www.google.com/maps/dir/"


def build_external_map_url(
    origin: str,
    destination: str,
    user_location: Coordinate | None = None,
) -> str | None:
    """Google Maps directions link, starting from ``user_location`` when known.

    Both endpoint texts are required, even when the live position replaces
    the origin.
    """
    origin = (origin or "").strip()
    destination = (destination or "").strip()
    if not origin or not destination:
        return None
    start = (
        f"{user_location.lat},{user_location.lng}" if user_location else origin
    )
    query = urlencode(
        {"api": 1, "origin": start, "destination": destination},
        quote_via=quote,
    )
    return f"{EXTERNAL_DIRECTIONS_URL}?{query}"


class RouteView:
    def __init__(
        self,
        geocoder: Geocoder,
        router: Router,
        *,
        on_route_calculated: OnRouteCalculated | None = None,
    ) -> None:
        self._geocoder = geocoder
        self._router = router
        self._on_route_calculated = on_route_calculated

        self.origin = ""
        self.destination = ""
        self.status = RouteDisplayStatus.IDLE
        self.waypoints: tuple[Waypoint, ...] = ()
        self.route: RouteResult | None = None
        self.user_location: Coordinate | None = None
        self.live = False
        self._generation = 0

    # ------------------------------------------------------------------
    # Read-only projections
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self.status is RouteDisplayStatus.RESOLVING

    @property
    def geometry(self) -> tuple[Coordinate, ...]:
        return self.route.geometry if self.route else ()

    @property
    def summary(self) -> RouteSummary | None:
        return self.route.summary if self.route else None

    @property
    def steps(self) -> tuple[RouteStep, ...]:
        return self.route.steps if self.route else ()

    @property
    def distance_display(self) -> str | None:
        if self.summary is None:
            return None
        if self.live:
            return self.summary.distance_label + REMAINING_SUFFIX
        return self.summary.distance_label

    def external_map_url(self) -> str | None:
        return build_external_map_url(self.origin, self.destination, self.user_location)

    def destination_waypoint(self) -> Waypoint | None:
        """The resolved endpoint whose label matches the destination text."""
        target = self.destination.strip()
        if not target:
            return None
        for waypoint in reversed(self.waypoints):
            if waypoint.label == target:
                return waypoint
        return None

    # ------------------------------------------------------------------
    # Static mode
    # ------------------------------------------------------------------

    def supersede(self) -> int:
        """Invalidate every in-flight computation and return the new generation."""
        self._generation += 1
        return self._generation

    async def set_endpoints(self, origin: str | None, destination: str | None) -> None:
        self.origin = origin or ""
        self.destination = destination or ""
        if self.live:
            # The tracker picks up the new destination on its next refresh.
            logger.debug("Endpoints changed while tracking; static route deferred")
            return
        await self.refresh()

    async def refresh(self) -> RouteDisplayStatus:
        """Geocode both endpoints and, if both resolve, fetch the static route."""
        generation = self.supersede()
        origin = self.origin.strip()
        destination = self.destination.strip()

        if not origin and not destination:
            self.waypoints = ()
            self.route = None
            self.status = RouteDisplayStatus.IDLE
            return self.status

        self.status = RouteDisplayStatus.RESOLVING
        start, end = await asyncio.gather(
            self._geocoder.resolve(origin),
            self._geocoder.resolve(destination),
        )
        if generation != self._generation:
            logger.debug("Discarding geocode results of superseded generation %s", generation)
            return self.status

        waypoints: list[Waypoint] = []
        if start is not None:
            waypoints.append(Waypoint(start, origin))
        if end is not None:
            waypoints.append(Waypoint(end, destination))
        self.waypoints = tuple(waypoints)

        if start is None or end is None:
            logger.info(
                "Route not computed: origin %s, destination %s",
                "resolved" if start else "unresolved",
                "resolved" if end else "unresolved",
            )
            self.status = RouteDisplayStatus.FAILED
            return self.status

        result = await self._router.route(start, end)
        if generation != self._generation:
            logger.debug("Discarding route of superseded generation %s", generation)
            return self.status
        if result is None:
            self.status = RouteDisplayStatus.FAILED
            return self.status

        await self.apply_route(result, generation)
        return self.status

    # ------------------------------------------------------------------
    # Shared by static and live mode
    # ------------------------------------------------------------------

    async def apply_route(self, result: RouteResult, generation: int) -> bool:
        """Show ``result`` and report it upward, unless it is stale."""
        if generation != self._generation:
            logger.debug(
                "Dropping late route (generation %s, current %s)",
                generation,
                self._generation,
            )
            return False

        self.route = result
        self.status = RouteDisplayStatus.READY
        await self._report(result.summary)
        return True

    async def _report(self, summary: RouteSummary) -> None:
        if self._on_route_calculated is None:
            return
        try:
            outcome = self._on_route_calculated(
                summary.distance_label,
                summary.duration_label,
                summary.duration_seconds,
                summary.distance_meters,
            )
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("Route calculated callback failed")

    # ------------------------------------------------------------------
    # Live mode hand-over
    # ------------------------------------------------------------------

    def enter_live_mode(self) -> None:
        self.live = True
        self.supersede()
        if self.status is RouteDisplayStatus.RESOLVING:
            # The static computation just superseded will never finish.
            self.status = (
                RouteDisplayStatus.READY if self.route else RouteDisplayStatus.IDLE
            )

    async def leave_live_mode(self, *, restore: bool = True) -> None:
        self.live = False
        self.user_location = None
        if restore:
            await self.refresh()
        else:
            self.supersede()

    def snapshot(self) -> dict[str, Any]:
        summary = self.summary
        return {
            "status": self.status.value,
            "loading": self.loading,
            "live": self.live,
            "origin": self.origin,
            "destination": self.destination,
            "waypoints": [w.to_dict() for w in self.waypoints],
            "geometry": [[c.lat, c.lng] for c in self.geometry],
            "summary": None
            if summary is None
            else {
                "distance": self.distance_display,
                "duration": summary.duration_label,
                "distance_meters": summary.distance_meters,
                "duration_seconds": summary.duration_seconds,
            },
            "steps": [
                {
                    "distance_meters": s.distance_meters,
                    "duration_seconds": s.duration_seconds,
                    "road_name": s.road_name,
                    "maneuver_type": s.maneuver_type,
                    "maneuver_modifier": s.maneuver_modifier,
                }
                for s in self.steps
            ],
            "user_location": None
            if self.user_location is None
            else self.user_location.to_dict(),
        }
