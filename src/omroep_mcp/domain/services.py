from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence

from omroep_mcp.domain.entities import Selection
from omroep_mcp.domain.exceptions import IncompleteSelectionError, ValidationError
from omroep_mcp.domain.value_objects import Notice

MAX_SUGGESTIONS = 5
MAX_HOUR = 23
MAX_MINUTE = 59


def match_stations(
    query: str,
    stations: Iterable[str],
    excluded: Collection[str] = (),
    limit: int = MAX_SUGGESTIONS,
) -> list[str]:
    """Return up to ``limit`` station names containing ``query``, case-insensitively.

    Directory order is preserved and names in ``excluded`` are skipped.
    An empty or whitespace-only query yields no suggestions at all rather than
    the unfiltered directory.
    """
    if not query.strip():
        return []
    needle = query.lower()
    matches: list[str] = []
    for name in stations:
        if needle in name.lower() and name not in excluded:
            matches.append(name)
            if len(matches) >= limit:
                break
    return matches


def intermediate_stops(
    route_stops: Sequence[str],
    from_station: str | None,
    to_station: str | None,
) -> list[str]:
    """Return route_stops without the departure and destination stations.

    Empty whenever either endpoint is unset.
    """
    if not from_station or not to_station or not route_stops:
        return []
    return [stop for stop in route_stops if stop != from_station and stop != to_station]


def parse_time_digits(text: str, maximum: int) -> int | None:
    """Parse one or two typed digits into an int in 0..maximum.

    Returns None for empty input (field cleared).
    Raises ValueError for non-digit, too long, or out-of-range input.
    """
    stripped = text.strip()
    if stripped == "":
        return None
    if not stripped.isdigit() or len(stripped) > 2:
        raise ValueError(f"Expected one or two digits, got {text!r}")
    value = int(stripped)
    if value > maximum:
        raise ValueError(f"Value {value} out of range 0-{maximum}")
    return value


def format_clock(hour: int, minute: int) -> str:
    """Return HH:MM with both parts zero-padded."""
    return f"{hour:02d}:{minute:02d}"


def compose_announcement(
    selection: Selection,
    stops: Sequence[str],
    notices: Sequence[str],
) -> str:
    """Assemble the announcement sentence.

    Template: "{type} van {from} naar {to}[ via {stops}], vertrekt om HH:MM[. {n1}. {n2}.]"

    Raises IncompleteSelectionError when any required field is missing; no
    partial text is ever produced.
    """
    missing = selection.missing_fields()
    if missing:
        raise IncompleteSelectionError(missing)

    text = f"{selection.train_type} van {selection.from_station} naar {selection.to_station}"
    if stops:
        text += f" via {', '.join(stops)}"
    clock = format_clock(selection.hour, selection.minute)  # type: ignore[arg-type]
    text += f", vertrekt om {clock}"
    if notices:
        text += f". {'. '.join(notices)}."
    return text


class NoticeSelector:
    """Toggle set over the notice catalog, kept in selection order."""

    def __init__(self) -> None:
        self._selected: list[str] = []

    @property
    def selected(self) -> tuple[str, ...]:
        return tuple(self._selected)

    def toggle(self, notice: str) -> tuple[str, ...]:
        """Add the notice if absent, remove it if present; return the new set."""
        valid_values = {n.value for n in Notice}
        if notice not in valid_values:
            raise ValidationError(f"Unknown notice: {notice}")
        if notice in self._selected:
            self._selected.remove(notice)
        else:
            self._selected.append(notice)
        return self.selected

    def is_selected(self, notice: str) -> bool:
        return notice in self._selected

    def clear(self) -> None:
        self._selected.clear()
