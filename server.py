#!/usr/bin/env python3
"""Treinomroep MCP Server — repository root entry point.

One server holds the announcement of a single operator; all clients share it.

Usage:
    uv run server.py           # HTTP mode (default)
    uv run server.py --stdio   # stdio mode for Claude Desktop
"""
from __future__ import annotations

import logging
import os
import sys
from zoneinfo import ZoneInfo

import uvicorn
from starlette.middleware.cors import CORSMiddleware

from omroep_mcp.infrastructure.route_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from omroep_mcp.infrastructure.station_directory import DEFAULT_STATIONS_FILE
from omroep_mcp.mcp import create_mcp_app

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3001"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
ROUTE_API_BASE_URL = os.environ.get("ROUTE_API_BASE_URL", DEFAULT_BASE_URL)
ROUTE_API_TIMEOUT = float(os.environ.get("ROUTE_API_TIMEOUT", str(DEFAULT_TIMEOUT)))
STATIONS_FILE = os.environ.get("STATIONS_FILE", str(DEFAULT_STATIONS_FILE))
ANNOUNCEMENT_TZ = os.environ.get("ANNOUNCEMENT_TZ", "Europe/Amsterdam")

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

if __name__ == "__main__":
    mcp = create_mcp_app(
        route_base_url=ROUTE_API_BASE_URL,
        route_timeout=ROUTE_API_TIMEOUT,
        stations_file=STATIONS_FILE,
        tz=ZoneInfo(ANNOUNCEMENT_TZ),
    )
    if "--stdio" in sys.argv:
        # Claude Desktop mode
        mcp.run(transport="stdio")
    else:
        # HTTP mode with CORS
        app = mcp.streamable_http_app()
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
        print(f"Treinomroep MCP Server listening on http://{HOST}:{PORT}/mcp")
        uvicorn.run(app, host=HOST, port=PORT)
