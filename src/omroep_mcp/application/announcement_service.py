from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any

from omroep_mcp.application.route_coordinator import RouteCoordinator
from omroep_mcp.domain.entities import RouteFetchFailure, RouteOutcome, Selection
from omroep_mcp.domain.exceptions import StationNotFoundError, ValidationError
from omroep_mcp.domain.services import (
    MAX_HOUR,
    MAX_MINUTE,
    NoticeSelector,
    compose_announcement,
    match_stations,
    parse_time_digits,
)
from omroep_mcp.domain.value_objects import RouteStatus, StationRole, TrainType
from omroep_mcp.infrastructure.station_directory import StationDirectory

logger = logging.getLogger(__name__)


class AnnouncementService:
    """Explicit state object behind the presentation layer.

    Owns the Selection and wires the station matcher, route coordinator,
    notice selector and composer together. Mutations are synchronous; the ones
    that affect the route (stations, hour, minute) call the recompute trigger,
    which schedules a route fetch on the running event loop without waiting
    for it.
    """

    def __init__(self, directory: StationDirectory, coordinator: RouteCoordinator) -> None:
        self._directory = directory
        self._coordinator = coordinator
        self._selection = Selection()
        self._notices = NoticeSelector()
        self._tasks: set[asyncio.Task[RouteOutcome]] = set()
        self._last_outcome: RouteOutcome | None = None

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def selection(self) -> Selection:
        return dataclasses.replace(self._selection)

    @property
    def route_stops(self) -> list[str]:
        return self._coordinator.route_stops

    @property
    def intermediate_stops(self) -> list[str]:
        return self._coordinator.intermediate_stops(
            self._selection.from_station, self._selection.to_station
        )

    @property
    def notices(self) -> tuple[str, ...]:
        return self._notices.selected

    @property
    def loading(self) -> bool:
        return self._coordinator.loading

    @property
    def last_failure(self) -> RouteFetchFailure | None:
        return self._coordinator.last_failure

    def snapshot(self) -> dict[str, Any]:
        """Return the full state as a JSON-serialisable dict."""
        failure = self.last_failure
        return {
            "selection": dataclasses.asdict(self._selection),
            "routeStops": self.route_stops,
            "intermediateStops": self.intermediate_stops,
            "notices": list(self.notices),
            "loading": self.loading,
            "lastFailure": dataclasses.asdict(failure) if failure else None,
        }

    # ------------------------------------------------------------------
    # Station matching
    # ------------------------------------------------------------------

    def suggest_stations(self, query: str, role: StationRole | str = StationRole.TO) -> list[str]:
        """Autocomplete suggestions, excluding the station chosen for the other endpoint."""
        role = _parse_role(role)
        other = self._selection.from_station if role is StationRole.TO else self._selection.to_station
        excluded = {other} if other else set()
        return match_stations(query, self._directory, excluded=excluded)

    # ------------------------------------------------------------------
    # Mutation entry points
    # ------------------------------------------------------------------

    def set_train_type(self, train_type: str) -> None:
        valid_values = {t.value for t in TrainType}
        if train_type not in valid_values:
            raise ValidationError(f"Unknown train type: {train_type}")
        self._selection.train_type = train_type

    def set_hour(self, text: str) -> bool:
        """Apply typed hour digits. Returns False (and changes nothing) when invalid."""
        return not self.set_departure_time(hours=text)

    def set_minute(self, text: str) -> bool:
        """Apply typed minute digits. Returns False (and changes nothing) when invalid."""
        return not self.set_departure_time(minutes=text)

    def set_departure_time(self, hours: str | None = None, minutes: str | None = None) -> list[str]:
        """Apply typed hour and/or minute digits with a single route recompute.

        Fields left as None are not touched. Invalid input for a field is
        ignored; the names of the rejected fields are returned.
        """
        changes: dict[str, int | None] = {}
        rejected = []
        for field_name, text, maximum in (("hour", hours, MAX_HOUR), ("minute", minutes, MAX_MINUTE)):
            if text is None:
                continue
            try:
                changes[field_name] = parse_time_digits(text, maximum)
            except ValueError:
                logger.debug("Rejected %s input %r", field_name, text)
                rejected.append(field_name)
        self._update_selection(**changes)
        return rejected

    def select_station(self, role: StationRole | str, name: str) -> None:
        role = _parse_role(role)
        if name not in self._directory:
            raise StationNotFoundError(f"Station not found: {name}")
        other = self._selection.from_station if role is StationRole.TO else self._selection.to_station
        if name == other:
            raise ValidationError(f"{name} is already selected as the other endpoint")

        if role is StationRole.FROM:
            self._update_selection(from_station=name)
        else:
            self._update_selection(to_station=name)

    def select_from_station(self, name: str) -> None:
        self.select_station(StationRole.FROM, name)

    def select_to_station(self, name: str) -> None:
        self.select_station(StationRole.TO, name)

    def clear_station(self, role: StationRole | str) -> None:
        role = _parse_role(role)
        if role is StationRole.FROM:
            self._selection.from_station = None
        else:
            self._selection.to_station = None
        self._trigger_route_refresh()

    def clear_from_station(self) -> None:
        self.clear_station(StationRole.FROM)

    def clear_to_station(self) -> None:
        self.clear_station(StationRole.TO)

    def remove_intermediate_stop(self, station: str) -> list[str]:
        """Manually drop a stop from the route; never triggers a re-fetch."""
        self._coordinator.remove_stop(station)
        return self.intermediate_stops

    def toggle_notice(self, notice: str) -> tuple[str, ...]:
        return self._notices.toggle(notice)

    def compose(self) -> str:
        """Build the announcement; raises IncompleteSelectionError when fields are missing."""
        return compose_announcement(self._selection, self.intermediate_stops, self.notices)

    def reset(self) -> None:
        """Start a fresh announcement."""
        self._selection = Selection()
        self._notices.clear()
        self._coordinator.reset()

    # ------------------------------------------------------------------
    # Route recomputation
    # ------------------------------------------------------------------

    async def wait_for_route(self) -> RouteOutcome | None:
        """Wait until every scheduled route fetch has resolved; return the latest outcome."""
        while self._tasks:
            await asyncio.gather(*self._tasks)
        return self._last_outcome

    async def refresh_route(self) -> RouteOutcome | None:
        """Re-issue the route request for the current selection (e.g. after a failure)."""
        self._trigger_route_refresh()
        return await self.wait_for_route()

    def _trigger_route_refresh(self) -> None:
        """Recompute trigger for changes to from, to, hour or minute."""
        sel = self._selection
        if not sel.from_station or not sel.to_station:
            self._last_outcome = self._coordinator.reset()
            return

        task = self._coordinator.schedule(sel.from_station, sel.to_station, sel.hour, sel.minute)
        if task is None:
            return
        self._tasks.add(task)
        task.add_done_callback(self._on_route_done)

    def _on_route_done(self, task: asyncio.Task[RouteOutcome]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Route task crashed", exc_info=exc)
            return
        outcome = task.result()
        if outcome.status is not RouteStatus.STALE:
            self._last_outcome = outcome

    def _update_selection(self, **changes: Any) -> None:
        """Write route-relevant fields and recompute the route once if anything changed.

        The write is rolled back when the recompute cannot be scheduled (no
        running event loop), so Selection never holds values no request was
        issued for.
        """
        previous = dataclasses.replace(self._selection)
        for field_name, value in changes.items():
            setattr(self._selection, field_name, value)
        if self._selection == previous:
            return
        try:
            self._trigger_route_refresh()
        except RuntimeError:
            self._selection = previous
            raise


def _parse_role(role: StationRole | str) -> StationRole:
    if isinstance(role, StationRole):
        return role
    try:
        return StationRole(role.lower())
    except ValueError:
        raise ValidationError(f"Unknown station role: {role}. Expected 'from' or 'to'")
