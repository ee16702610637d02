from __future__ import annotations


class OmroepError(Exception):
    """Base exception for all announcement generator errors."""


class ValidationError(OmroepError):
    """Raised when input fails validation at a mutation boundary."""


class StationNotFoundError(OmroepError):
    """Raised when a station name is not part of the station directory."""


class IncompleteSelectionError(OmroepError):
    """Raised by the composer when required selection fields are missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Incomplete selection, missing: {', '.join(missing)}")


class ApiError(OmroepError):
    """Raised when the route service returns a non-2xx HTTP status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"Route service error ({status_code})")


class MalformedRouteError(OmroepError):
    """Raised when a 2xx route response lacks a usable stops array."""
