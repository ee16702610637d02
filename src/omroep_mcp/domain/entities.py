from __future__ import annotations

from dataclasses import dataclass, field

from omroep_mcp.domain.value_objects import RouteStatus


@dataclass(frozen=True)
class Station:
    """A station from the static station directory."""

    name: str


@dataclass
class Selection:
    """The operator's current choices. None means "not yet chosen"."""

    train_type: str | None = None
    from_station: str | None = None
    to_station: str | None = None
    hour: int | None = None  # 0-23
    minute: int | None = None  # 0-59

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are still empty."""
        missing = []
        if not self.train_type:
            missing.append("train_type")
        if not self.from_station:
            missing.append("from_station")
        if not self.to_station:
            missing.append("to_station")
        if self.hour is None:
            missing.append("hour")
        if self.minute is None:
            missing.append("minute")
        return missing


@dataclass(frozen=True)
class RouteFetchFailure:
    """A route service failure surfaced as a value rather than an exception."""

    reason: str
    status_code: int | None = None  # None for transport errors and bad payloads


@dataclass(frozen=True)
class RouteOutcome:
    """The result of one route derivation request."""

    status: RouteStatus
    sequence: int
    stops: list[str] = field(default_factory=list)
    failure: RouteFetchFailure | None = None
