from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from omroep_mcp.domain.value_objects import Notice, TrainType
from omroep_mcp.infrastructure.station_directory import StationDirectory


def register_resources(mcp: FastMCP, directory: StationDirectory) -> None:
    """Register the catalog resources. Called once during server setup."""

    @mcp.resource("omroep://catalog/train-types", mime_type="application/json")
    def train_types() -> str:
        """Train types that can be announced."""
        return json.dumps([t.value for t in TrainType], ensure_ascii=False)

    @mcp.resource("omroep://catalog/notices", mime_type="application/json")
    def notices() -> str:
        """Standard service notices, in catalog order."""
        return json.dumps([n.value for n in Notice], ensure_ascii=False)

    @mcp.resource("omroep://catalog/stations", mime_type="application/json")
    def stations() -> str:
        """All known station names."""
        return json.dumps(list(directory.names), ensure_ascii=False)
