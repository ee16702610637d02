from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

AMSTERDAM_TZ: ZoneInfo = ZoneInfo("Europe/Amsterdam")

DEFAULT_ROUTE_HOUR = 10
DEFAULT_ROUTE_MINUTE = 0
ROUTE_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"


def now_local(tz: ZoneInfo = AMSTERDAM_TZ) -> datetime:
    """Return the current moment as a timezone-aware datetime in ``tz``."""
    return datetime.now(tz=tz)


def route_departure_time(
    hour: int | None,
    minute: int | None,
    now: datetime,
) -> datetime:
    """Return the moment to request a route for.

    Always the next calendar day after ``now``: at hour:minute when both are
    given, otherwise at 10:00.
    """
    tomorrow = (now + timedelta(days=1)).date()
    if hour is None or minute is None:
        hour, minute = DEFAULT_ROUTE_HOUR, DEFAULT_ROUTE_MINUTE
    return datetime(
        tomorrow.year, tomorrow.month, tomorrow.day, hour, minute, tzinfo=now.tzinfo
    )


def format_route_datetime(dt: datetime) -> str:
    """Return YYYY-MM-DDTHH:MM as expected by the route service dateTime field."""
    return dt.strftime(ROUTE_DATETIME_FORMAT)
