"""Tests for MCP tool functions — input validation, success and error paths."""
from __future__ import annotations

import json
from unittest.mock import MagicMock

import httpx

from omroep_mcp.application.announcement_service import AnnouncementService
from omroep_mcp.domain.exceptions import ApiError
from omroep_mcp.infrastructure.station_directory import StationDirectory
from omroep_mcp.mcp.resources import register_resources
from omroep_mcp.mcp.tools import register_tools


class MockMcp:
    """Stand-in for FastMCP that records decorated functions by name."""

    def __init__(self) -> None:
        self.tools: dict = {}  # type: ignore[type-arg]
        self.resources: dict = {}  # type: ignore[type-arg]

    def tool(self, meta: dict | None = None):  # type: ignore[type-arg]
        def decorator(fn):  # type: ignore[no-untyped-def]
            self.tools[fn.__name__] = fn
            return fn
        return decorator

    def resource(self, uri: str, *args, **kwargs):  # type: ignore[no-untyped-def]
        def decorator(fn):  # type: ignore[no-untyped-def]
            self.resources[uri] = fn
            return fn
        return decorator


def build_tool_functions(service: AnnouncementService) -> dict:  # type: ignore[type-arg]
    mock_mcp = MockMcp()
    register_tools(mock_mcp, service)  # type: ignore[arg-type]
    return mock_mcp.tools


def parse(result: list) -> dict:  # type: ignore[type-arg]
    return json.loads(result[0].resource.text)  # type: ignore[no-any-return]


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

async def test_full_announcement_flow(service: AnnouncementService) -> None:
    tools = build_tool_functions(service)

    assert parse(await tools["search_stations"]("scha", "from"))["suggestions"] == ["Schagen"]
    await tools["set_train_type"]("Intercity")
    await tools["set_departure_time"]("9", "5")
    await tools["select_station"]("from", "Schagen")
    state = parse(await tools["select_station"]("to", "Den Helder"))

    assert state["routeStatus"] == "applied"
    assert state["intermediateStops"] == ["Anna Paulowna", "Den Helder Zuid"]

    state = parse(await tools["remove_intermediate_stop"]("Den Helder Zuid"))
    assert state["intermediateStops"] == ["Anna Paulowna"]

    await tools["toggle_notice"]("Rijdt niet")
    result = parse(await tools["generate_announcement"]())

    assert result["announcement"] == (
        "Intercity van Schagen naar Den Helder via Anna Paulowna, vertrekt om 09:05. Rijdt niet."
    )


async def test_set_departure_time_reports_rejected_digits(service: AnnouncementService) -> None:
    tools = build_tool_functions(service)

    state = parse(await tools["set_departure_time"]("25", "30"))

    assert state["rejected"] == ["hours"]
    assert state["selection"]["hour"] is None
    assert state["selection"]["minute"] == 30


async def test_set_departure_time_looks_route_up_once(
    service: AnnouncementService, route_client: MagicMock
) -> None:
    tools = build_tool_functions(service)
    await tools["select_station"]("from", "Schagen")
    await tools["select_station"]("to", "Den Helder")

    state = parse(await tools["set_departure_time"]("9", "30"))

    assert state["routeStatus"] == "applied"
    assert route_client.fetch_route.await_count == 2
    assert route_client.fetch_route.await_args.args[2] == "2026-02-25T09:30"


async def test_tool_registrations_share_one_announcement(service: AnnouncementService) -> None:
    first_client = build_tool_functions(service)
    second_client = build_tool_functions(service)

    await first_client["set_train_type"]("Sprinter")
    state = parse(await second_client["get_announcement_state"]())

    assert state["selection"]["train_type"] == "Sprinter"


async def test_clear_station_resets_route(service: AnnouncementService) -> None:
    tools = build_tool_functions(service)
    await tools["select_station"]("from", "Schagen")
    await tools["select_station"]("to", "Den Helder")

    state = parse(await tools["clear_station"]("from"))

    assert state["routeStops"] == []
    assert state["intermediateStops"] == []
    assert state["selection"]["from_station"] is None


async def test_get_state_and_reset(service: AnnouncementService) -> None:
    tools = build_tool_functions(service)
    await tools["toggle_notice"]("Vertraging")
    assert parse(await tools["get_announcement_state"]())["notices"] == ["Vertraging"]

    state = parse(await tools["reset_announcement"]())
    assert state["notices"] == []


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

async def test_generate_incomplete_returns_error(service: AnnouncementService) -> None:
    tools = build_tool_functions(service)
    await tools["set_train_type"]("Sprinter")

    parsed = parse(await tools["generate_announcement"]())

    assert "error" in parsed
    assert parsed["missing"] == ["from_station", "to_station", "hour", "minute"]


async def test_unknown_station_returns_error(service: AnnouncementService) -> None:
    tools = build_tool_functions(service)
    parsed = parse(await tools["select_station"]("from", "Atlantis"))
    assert "Station not found" in parsed["error"]


async def test_unknown_role_returns_error(service: AnnouncementService) -> None:
    tools = build_tool_functions(service)
    parsed = parse(await tools["select_station"]("via", "Schagen"))
    assert "role" in parsed["error"]


async def test_unknown_train_type_and_notice_return_error(service: AnnouncementService) -> None:
    tools = build_tool_functions(service)
    assert "Hyperloop" in parse(await tools["set_train_type"]("Hyperloop"))["error"]
    assert "Koffie" in parse(await tools["toggle_notice"]("Koffie"))["error"]


async def test_route_failure_is_reported_in_state(
    service: AnnouncementService, route_client: MagicMock
) -> None:
    route_client.fetch_route.side_effect = ApiError(500)
    tools = build_tool_functions(service)
    await tools["select_station"]("from", "Schagen")

    state = parse(await tools["select_station"]("to", "Den Helder"))

    assert state["routeStatus"] == "failed"
    assert "routeError" in state
    assert state["lastFailure"]["status_code"] == 500
    assert state["selection"]["to_station"] == "Den Helder"


async def test_retry_route_after_timeout(service: AnnouncementService, route_client: MagicMock) -> None:
    route_client.fetch_route.side_effect = [httpx.ReadTimeout("slow"), ["Schagen", "Anna Paulowna", "Den Helder"]]
    tools = build_tool_functions(service)
    await tools["select_station"]("from", "Schagen")
    assert parse(await tools["select_station"]("to", "Den Helder"))["routeStatus"] == "failed"

    state = parse(await tools["retry_route"]())

    assert state["routeStatus"] == "applied"
    assert state["lastFailure"] is None
    assert state["intermediateStops"] == ["Anna Paulowna"]


async def test_unexpected_exception_returns_resource_not_exception() -> None:
    service = MagicMock(spec=AnnouncementService)
    service.compose.side_effect = RuntimeError("boom")
    tools = build_tool_functions(service)

    result = await tools["generate_announcement"]()

    assert isinstance(result, list)
    assert parse(result)["error"] == "An unexpected error occurred."


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

def test_catalog_resources(directory: StationDirectory) -> None:
    mock_mcp = MockMcp()
    register_resources(mock_mcp, directory)  # type: ignore[arg-type]

    train_types = json.loads(mock_mcp.resources["omroep://catalog/train-types"]())
    notices = json.loads(mock_mcp.resources["omroep://catalog/notices"]())
    stations = json.loads(mock_mcp.resources["omroep://catalog/stations"]())

    assert train_types[0] == "Intercity"
    assert len(train_types) == 9
    assert notices[0] == "Rijdt niet"
    assert notices[-1] == "Defecte bovenleiding"
    assert len(notices) == 16
    assert "Schagen" in stations
