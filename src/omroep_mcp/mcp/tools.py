from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from mcp import types
from mcp.server.fastmcp import FastMCP

from omroep_mcp.application.announcement_service import AnnouncementService
from omroep_mcp.domain.entities import RouteOutcome
from omroep_mcp.domain.exceptions import (
    ApiError,
    IncompleteSelectionError,
    StationNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_RESULT_URI = "mcp://omroep-mcp/result"


def _as_resource(json_str: str) -> list[types.EmbeddedResource]:
    """Wrap a JSON string as an embedded resource so the LLM does not narrate it."""
    return [
        types.EmbeddedResource(
            type="resource",
            resource=types.TextResourceContents(
                uri=_RESULT_URI,  # type: ignore[arg-type]
                mimeType="application/json",
                text=json_str,
            ),
        )
    ]


def _error_json(message: str, **extra: Any) -> str:
    return json.dumps({"error": message, **extra}, ensure_ascii=False)


def _handle_exception(exc: Exception) -> list[types.EmbeddedResource]:
    if isinstance(exc, IncompleteSelectionError):
        return _as_resource(
            _error_json(
                "Vul minimaal treintype, van, naar en tijd in.",
                missing=exc.missing,
            )
        )
    if isinstance(exc, (StationNotFoundError, ValidationError)):
        return _as_resource(_error_json(str(exc)))
    if isinstance(exc, ApiError):
        if exc.status_code >= 500:
            return _as_resource(
                _error_json(f"Route service error ({exc.status_code}). Please try again later.")
            )
        return _as_resource(_error_json(str(exc)))
    if isinstance(exc, httpx.TimeoutException):
        return _as_resource(_error_json("Request timed out. Please try again."))
    logger.exception("Unexpected error in MCP tool: %s", exc)
    return _as_resource(_error_json("An unexpected error occurred."))


def _state_json(service: AnnouncementService, outcome: RouteOutcome | None = None, **extra: Any) -> str:
    state = service.snapshot()
    if outcome is not None:
        state["routeStatus"] = outcome.status.value
        if outcome.failure is not None:
            state["routeError"] = (
                "Kon de route niet ophalen. Controleer of de route service draait."
            )
    state.update(extra)
    return json.dumps(state, ensure_ascii=False)


def register_tools(mcp: FastMCP, service: AnnouncementService) -> None:
    """Bind all @mcp.tool decorators. Called once during server setup."""

    @mcp.tool()
    async def search_stations(query: str, role: str = "to") -> list[types.EmbeddedResource]:
        """Autocomplete station names (at most 5, case-insensitive substring match).

        Args:
            query: Text typed so far, e.g. "scha".
            role: "from" or "to"; the station already chosen for the other
                  endpoint is left out of the suggestions.
        """
        try:
            suggestions = service.suggest_stations(query, role)
            return _as_resource(json.dumps({"suggestions": suggestions}, ensure_ascii=False))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def set_train_type(train_type: str) -> list[types.EmbeddedResource]:
        """Choose the train type, e.g. "Intercity" or "Sprinter".

        Args:
            train_type: One of the names from omroep://catalog/train-types.
        """
        try:
            service.set_train_type(train_type)
            return _as_resource(_state_json(service))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def set_departure_time(hours: str, minutes: str) -> list[types.EmbeddedResource]:
        """Set the departure time from typed digits. Invalid digits are ignored.

        Args:
            hours: "0"-"23", or "" to clear.
            minutes: "0"-"59", or "" to clear.
        """
        try:
            rejected = [
                f"{name}s" for name in service.set_departure_time(hours=hours, minutes=minutes)
            ]
            outcome = await service.wait_for_route()
            return _as_resource(_state_json(service, outcome, rejected=rejected))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def select_station(role: str, name: str) -> list[types.EmbeddedResource]:
        """Pick the departure ("from") or destination ("to") station.

        Once both are set the route is looked up and intermediate stops filled in.

        Args:
            role: "from" or "to".
            name: Exact station name as returned by search_stations.
        """
        try:
            service.select_station(role, name)
            outcome = await service.wait_for_route()
            return _as_resource(_state_json(service, outcome))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def clear_station(role: str) -> list[types.EmbeddedResource]:
        """Clear the departure ("from") or destination ("to") station; the route is reset."""
        try:
            service.clear_station(role)
            return _as_resource(_state_json(service))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def remove_intermediate_stop(station: str) -> list[types.EmbeddedResource]:
        """Remove one intermediate stop from the route without looking it up again."""
        try:
            service.remove_intermediate_stop(station)
            return _as_resource(_state_json(service))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def toggle_notice(notice: str) -> list[types.EmbeddedResource]:
        """Add or remove a service notice, e.g. "Vertraging".

        Args:
            notice: One of the notices from omroep://catalog/notices.
        """
        try:
            service.toggle_notice(notice)
            return _as_resource(_state_json(service))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def retry_route() -> list[types.EmbeddedResource]:
        """Look the route up again for the current stations and time."""
        try:
            outcome = await service.refresh_route()
            return _as_resource(_state_json(service, outcome))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def get_announcement_state() -> list[types.EmbeddedResource]:
        """Return the current selection, route, notices and loading state."""
        try:
            return _as_resource(_state_json(service))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def generate_announcement() -> list[types.EmbeddedResource]:
        """Compose the platform announcement from the current state."""
        try:
            announcement = service.compose()
            return _as_resource(json.dumps({"announcement": announcement}, ensure_ascii=False))
        except Exception as exc:
            return _handle_exception(exc)

    @mcp.tool()
    async def reset_announcement() -> list[types.EmbeddedResource]:
        """Discard all choices and start a new announcement."""
        try:
            service.reset()
            return _as_resource(_state_json(service))
        except Exception as exc:
            return _handle_exception(exc)
