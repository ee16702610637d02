from __future__ import annotations

import logging
from typing import Any

import httpx

from omroep_mcp.domain.exceptions import ApiError, MalformedRouteError
from omroep_mcp.infrastructure.headers import make_headers

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 10.0  # seconds
ROUTE_PATH = "/api/route"


class RouteClient:
    """HTTP client for the route service.

    A single httpx.AsyncClient instance is shared for the process lifetime.
    Responses are never cached: every call is one request.
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: str = DEFAULT_BASE_URL) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    @property
    def route_url(self) -> str:
        return f"{self._base_url}{ROUTE_PATH}"

    async def fetch_route(self, from_station: str, to_station: str, date_time: str) -> list[str]:
        """POST /api/route and return the ordered stop names verbatim.

        Raises ApiError on non-2xx status, MalformedRouteError when the body is
        not JSON or lacks a ``stops`` array. httpx transport errors (including
        timeouts) propagate unchanged.
        """
        headers = make_headers()
        body = {"from": from_station, "to": to_station, "dateTime": date_time}
        logger.debug(
            "Route request %s -> %s at %s (correlation %s)",
            from_station,
            to_station,
            date_time,
            headers["x-correlation-id"],
        )
        response = await self._http.post(self.route_url, json=body, headers=headers)
        self._raise_for_status(response)
        return self._parse_stops(response)

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise ApiError for non-2xx responses."""
        if response.status_code == 404:
            raise ApiError(404, f"Route not found (404): {response.url}")
        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code)

    def _parse_stops(self, response: httpx.Response) -> list[str]:
        try:
            data: Any = response.json()
        except ValueError as exc:
            raise MalformedRouteError("Route response is not valid JSON") from exc

        stops = data.get("stops") if isinstance(data, dict) else None
        if not isinstance(stops, list):
            raise MalformedRouteError("Route response lacks a stops array")
        if not all(isinstance(stop, str) for stop in stops):
            raise MalformedRouteError("Route response contains non-string stops")
        return stops

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()
