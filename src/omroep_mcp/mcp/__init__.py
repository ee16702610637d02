from __future__ import annotations

from functools import partial
from pathlib import Path
from zoneinfo import ZoneInfo

import httpx
from mcp.server.fastmcp import FastMCP

from omroep_mcp.application.announcement_service import AnnouncementService
from omroep_mcp.application.route_coordinator import RouteCoordinator
from omroep_mcp.infrastructure.route_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, RouteClient
from omroep_mcp.infrastructure.station_directory import DEFAULT_STATIONS_FILE, StationDirectory
from omroep_mcp.infrastructure.time_utils import AMSTERDAM_TZ, now_local
from omroep_mcp.mcp.resources import register_resources
from omroep_mcp.mcp.tools import register_tools


def create_mcp_app(
    route_base_url: str = DEFAULT_BASE_URL,
    route_timeout: float = DEFAULT_TIMEOUT,
    stations_file: Path | str = DEFAULT_STATIONS_FILE,
    tz: ZoneInfo = AMSTERDAM_TZ,
) -> FastMCP:
    """Create and configure the FastMCP application with all services wired.

    One AnnouncementService backs every tool call: the server holds the state
    of a single operator's announcement, shared by all connected clients.
    Run one server per operator.
    """
    directory = StationDirectory.from_json_file(stations_file)
    http_client = httpx.AsyncClient(timeout=route_timeout, follow_redirects=True)
    route_client = RouteClient(http_client=http_client, base_url=route_base_url)
    coordinator = RouteCoordinator(route_client, clock=partial(now_local, tz))

    service = AnnouncementService(directory, coordinator)

    mcp = FastMCP("Treinomroep MCP", stateless_http=True)
    register_tools(mcp, service)
    register_resources(mcp, directory)
    return mcp
