from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

import httpx

from omroep_mcp.domain.entities import RouteFetchFailure, RouteOutcome
from omroep_mcp.domain.exceptions import ApiError, MalformedRouteError
from omroep_mcp.domain.services import intermediate_stops
from omroep_mcp.domain.value_objects import RouteStatus
from omroep_mcp.infrastructure.route_client import RouteClient
from omroep_mcp.infrastructure.time_utils import (
    format_route_datetime,
    now_local,
    route_departure_time,
)

logger = logging.getLogger(__name__)


class RouteCoordinator:
    """Owns RouteStops and derives them from (from, to, hour, minute).

    Every request takes the next sequence number. A response is applied only
    while its sequence number is still the latest issued; anything older is
    discarded, so overlapping requests can resolve in any order.
    """

    def __init__(
        self,
        client: RouteClient,
        clock: Callable[[], datetime] = now_local,
    ) -> None:
        self._client = client
        self._clock = clock
        self._route_stops: list[str] = []
        self._sequence = 0
        self._pending_sequence: int | None = None
        self._last_failure: RouteFetchFailure | None = None

    @property
    def route_stops(self) -> list[str]:
        return list(self._route_stops)

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    @property
    def loading(self) -> bool:
        """True while the most recently issued request has not resolved."""
        return self._pending_sequence is not None

    @property
    def last_failure(self) -> RouteFetchFailure | None:
        return self._last_failure

    def intermediate_stops(self, from_station: str | None, to_station: str | None) -> list[str]:
        return intermediate_stops(self._route_stops, from_station, to_station)

    def reset(self) -> RouteOutcome:
        """Clear RouteStops and invalidate every in-flight request."""
        self._sequence += 1
        self._pending_sequence = None
        self._route_stops = []
        self._last_failure = None
        return RouteOutcome(status=RouteStatus.CLEARED, sequence=self._sequence)

    def remove_stop(self, station: str) -> list[str]:
        """Drop ``station`` from RouteStops without re-fetching. Idempotent."""
        self._route_stops = [stop for stop in self._route_stops if stop != station]
        return self.route_stops

    async def derive_route(
        self,
        from_station: str | None,
        to_station: str | None,
        hour: int | None,
        minute: int | None,
    ) -> RouteOutcome:
        """Fetch the route for the given selection and apply it if still current.

        Never raises for route service problems: failures come back as a
        RouteOutcome with status FAILED.
        """
        if not from_station or not to_station:
            return self.reset()
        return await self._fetch(self._issue(), from_station, to_station, hour, minute)

    def schedule(
        self,
        from_station: str | None,
        to_station: str | None,
        hour: int | None,
        minute: int | None,
    ) -> asyncio.Task[RouteOutcome] | None:
        """Start a derivation on the running loop without waiting for it.

        The sequence number is taken immediately, so a reset or a newer request
        made before the task first runs still supersedes it. Returns None when
        an endpoint is empty (RouteStops reset, nothing scheduled).
        """
        if not from_station or not to_station:
            self.reset()
            return None
        # Raises RuntimeError without a running loop, before any state changes
        loop = asyncio.get_running_loop()
        sequence = self._issue()
        return loop.create_task(
            self._fetch(sequence, from_station, to_station, hour, minute)
        )

    def _issue(self) -> int:
        self._sequence += 1
        self._pending_sequence = self._sequence
        return self._sequence

    async def _fetch(
        self,
        sequence: int,
        from_station: str,
        to_station: str,
        hour: int | None,
        minute: int | None,
    ) -> RouteOutcome:
        departure = route_departure_time(hour, minute, now=self._clock())
        date_time = format_route_datetime(departure)
        logger.debug("Route request #%d: %s -> %s at %s", sequence, from_station, to_station, date_time)

        try:
            try:
                stops = await self._client.fetch_route(from_station, to_station, date_time)
            except (ApiError, MalformedRouteError, httpx.HTTPError) as exc:
                return self._fail(sequence, exc)

            if sequence != self._sequence:
                logger.debug("Discarding stale route response #%d (latest #%d)", sequence, self._sequence)
                return RouteOutcome(status=RouteStatus.STALE, sequence=sequence, stops=stops)

            self._route_stops = list(stops)
            self._last_failure = None
            return RouteOutcome(status=RouteStatus.APPLIED, sequence=sequence, stops=self.route_stops)
        finally:
            if self._pending_sequence == sequence:
                self._pending_sequence = None

    def _fail(self, sequence: int, exc: Exception) -> RouteOutcome:
        failure = _to_failure(exc)
        if sequence != self._sequence:
            logger.debug("Discarding stale route failure #%d: %s", sequence, failure.reason)
            return RouteOutcome(status=RouteStatus.STALE, sequence=sequence, failure=failure)

        logger.warning("Route request #%d failed: %s", sequence, failure.reason)
        self._last_failure = failure
        return RouteOutcome(status=RouteStatus.FAILED, sequence=sequence, failure=failure)


def _to_failure(exc: Exception) -> RouteFetchFailure:
    if isinstance(exc, ApiError):
        return RouteFetchFailure(reason=str(exc), status_code=exc.status_code)
    if isinstance(exc, httpx.TimeoutException):
        return RouteFetchFailure(reason="Route service timed out")
    if isinstance(exc, httpx.HTTPError):
        return RouteFetchFailure(reason=f"Route service unreachable: {exc}")
    return RouteFetchFailure(reason=str(exc))
