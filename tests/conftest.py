"""Shared pytest fixtures for the Treinomroep MCP test suite."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fakes import FakeRouteClient, fixed_clock

from omroep_mcp.application.announcement_service import AnnouncementService
from omroep_mcp.application.route_coordinator import RouteCoordinator
from omroep_mcp.infrastructure.station_directory import StationDirectory

STATION_NAMES = [
    "Alkmaar",
    "Alkmaar Noord",
    "Anna Paulowna",
    "Den Haag Centraal",
    "Den Haag HS",
    "Den Helder",
    "Den Helder Zuid",
    "Heerhugowaard",
    "Schagen",
    "Schiphol Airport",
]


@pytest.fixture
def directory() -> StationDirectory:
    return StationDirectory.from_records({"name": n} for n in STATION_NAMES)


@pytest.fixture
def route_client() -> MagicMock:
    """Route client mock that resolves immediately with a Schagen -> Den Helder route."""
    client = MagicMock()
    client.fetch_route = AsyncMock(
        return_value=["Schagen", "Anna Paulowna", "Den Helder Zuid", "Den Helder"]
    )
    return client


@pytest.fixture
def fake_route_client() -> FakeRouteClient:
    return FakeRouteClient()


@pytest.fixture
def coordinator(route_client: MagicMock) -> RouteCoordinator:
    return RouteCoordinator(route_client, clock=fixed_clock)


@pytest.fixture
def fake_coordinator(fake_route_client: FakeRouteClient) -> RouteCoordinator:
    """Coordinator whose route responses are resolved manually by the test."""
    return RouteCoordinator(fake_route_client, clock=fixed_clock)  # type: ignore[arg-type]


@pytest.fixture
def service(directory: StationDirectory, coordinator: RouteCoordinator) -> AnnouncementService:
    return AnnouncementService(directory, coordinator)


@pytest.fixture
def fake_service(directory: StationDirectory, fake_coordinator: RouteCoordinator) -> AnnouncementService:
    return AnnouncementService(directory, fake_coordinator)
