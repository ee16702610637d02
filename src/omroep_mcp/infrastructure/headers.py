from __future__ import annotations

from uuid import uuid4

USER_AGENT = "treinomroep-mcp/0.1"


def make_headers() -> dict[str, str]:
    """Return the headers sent with every route service request.

    x-correlation-id is freshly generated on every call so that a single
    request can be traced in the route service logs.
    """
    return {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
        "x-correlation-id": str(uuid4()),
    }
