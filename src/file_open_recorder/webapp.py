"""FastAPI application that lets an editor integration drive a recording session."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, ConfigDict

from .config import RecorderSettings
from .focus import ManualFocusSource
from .models import CommandResult
from .reporting import format_duration
from .tracker import RecorderSession
from .writer import ResultWriter

logger = logging.getLogger(__name__)


class FocusPayload(BaseModel):
    path: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


def create_app(
    settings: RecorderSettings,
    *,
    writer: Optional[ResultWriter] = None,
    clock: Optional[Callable[[], int]] = None,
) -> FastAPI:
    """Instantiate the FastAPI application.

    Handlers are coroutines without awaits, so the event loop admits one
    session event at a time.
    """
    source = ManualFocusSource()
    session = RecorderSession(
        source,
        writer or ResultWriter(settings.output_directory),
        workspace_root=settings.workspace_root,
        aggregation_directories=settings.aggregation_directories,
        clock=clock,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            result_dir = session.teardown()
        except OSError:
            logger.exception("Failed to write the active session on shutdown.")
            return
        if result_dir is not None:
            logger.info("Session written on shutdown to %s", result_dir)

    app = FastAPI(title="File Open Recorder", version="0.1.0", lifespan=lifespan)
    app.state.session = session
    app.state.focus_source = source

    @app.post("/api/start")
    async def start(request: Request) -> Dict[str, Any]:
        return _command_response(request, request.app.state.session.start())

    @app.post("/api/pause")
    async def pause(request: Request) -> Dict[str, Any]:
        return _command_response(request, request.app.state.session.pause())

    @app.post("/api/stop")
    async def stop(request: Request) -> Dict[str, Any]:
        try:
            result = request.app.state.session.stop()
        except OSError as exc:
            logger.exception("Failed to write recording results.")
            raise HTTPException(
                status_code=500, detail=f"failed to write results: {exc}"
            ) from exc
        return _command_response(request, result)

    @app.post("/api/focus")
    async def focus(request: Request, payload: FocusPayload) -> Dict[str, Any]:
        request.app.state.focus_source.focus(payload.path)
        return _status_response(request)

    @app.get("/api/status")
    async def status(request: Request) -> Dict[str, Any]:
        return _status_response(request)

    return app


def _status_response(request: Request) -> Dict[str, Any]:
    current = request.app.state.session.status()
    return {
        "state": current.state.value,
        "current_file": current.current_file,
        "open_seconds": current.open_seconds,
        "files": {
            identity: format_duration(seconds)
            for identity, seconds in current.files.items()
        },
    }


def _command_response(request: Request, result: CommandResult) -> Dict[str, Any]:
    return {
        "accepted": result.accepted,
        "message": result.message,
        "state": request.app.state.session.state.value,
    }
