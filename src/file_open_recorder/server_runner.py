"""Helpers to launch the local HTTP event endpoint."""

from __future__ import annotations

import logging

import uvicorn

from .config import RecorderSettings
from .webapp import create_app


def run_server(
    settings: RecorderSettings,
    *,
    host: str = "127.0.0.1",
    port: int = 8766,
    log_level: str = "info",
) -> None:
    """Serve the recorder API until interrupted; active sessions are written on shutdown."""
    app = create_app(settings)
    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)
