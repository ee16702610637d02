from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from omroep_mcp.domain.entities import Station

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_STATIONS_FILE = _DATA_DIR / "stations.json"


class StationDirectory:
    """Immutable, ordered catalog of known station names.

    Loaded once at startup; lookups are a linear scan, which is fine for a few
    hundred stations.
    """

    def __init__(self, stations: Iterable[Station]) -> None:
        seen: set[str] = set()
        ordered: list[Station] = []
        for station in stations:
            if station.name in seen:
                continue
            seen.add(station.name)
            ordered.append(station)
        self._stations: tuple[Station, ...] = tuple(ordered)
        self._names: frozenset[str] = frozenset(seen)

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> StationDirectory:
        """Build from raw records; entries without a non-empty ``name`` are skipped."""
        stations = []
        for raw in records:
            name = raw.get("name")
            if isinstance(name, str) and name.strip():
                stations.append(Station(name=name.strip()))
        return cls(stations)

    @classmethod
    def from_json_file(cls, path: Path | str = DEFAULT_STATIONS_FILE) -> StationDirectory:
        """Load ``{"stations": [{"name": ...}, ...]}`` from disk."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        records = data.get("stations", []) if isinstance(data, dict) else data
        directory = cls.from_records(records)
        logger.info("Loaded %d stations from %s", len(directory), path)
        return directory

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self._stations)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return (s.name for s in self._stations)

    def __len__(self) -> int:
        return len(self._stations)
