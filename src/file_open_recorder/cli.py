"""Command-line interface for the recorder."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from .config import ConfigError, RecorderSettings
from .focus import ManualFocusSource
from .models import CommandResult, RecordingState
from .paths import get_log_path
from .reporting import format_duration
from .tracker import RecorderSession
from .writer import ResultWriter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
MENU_CHOICES = ("start", "pause", "stop")
CONFIRMATIONS = {
    "start": "recording started",
    "pause": "recording paused",
    "stop": "recording stopped",
}

app = typer.Typer(help="Record how long each file stays in focus.")


@app.callback(no_args_is_help=True)
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    log_file: bool = typer.Option(
        False, "--log-file", help="Also write logs to the per-user data directory."
    ),
) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(get_log_path(), encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def _load_settings(
    workspace: Optional[Path],
    output_dir: Optional[Path],
    aggregate: Optional[List[str]],
) -> RecorderSettings:
    try:
        return RecorderSettings.load(
            workspace or Path.cwd(),
            output_directory=output_dir,
            aggregation_directories=aggregate,
        )
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


_WORKSPACE_OPTION = typer.Option(
    None, "--workspace", "-w", path_type=Path, help="Workspace root. Defaults to the current directory."
)
_OUTPUT_OPTION = typer.Option(
    None, "--output-dir", "-o", path_type=Path, help="Directory receiving session results."
)
_AGGREGATE_OPTION = typer.Option(
    None, "--aggregate", "-a", help="Directory prefix to total separately (repeatable)."
)


@app.command()
def record(
    workspace: Optional[Path] = _WORKSPACE_OPTION,
    output_dir: Optional[Path] = _OUTPUT_OPTION,
    aggregate: Optional[List[str]] = _AGGREGATE_OPTION,
) -> None:
    """Drive a session from commands read on stdin, one per line.

    Commands: start, pause, stop, focus PATH, blur, status, menu, quit.
    """
    settings = _load_settings(workspace, output_dir, aggregate)
    source = ManualFocusSource()
    session = RecorderSession(
        source,
        ResultWriter(settings.output_directory),
        workspace_root=settings.workspace_root,
        aggregation_directories=settings.aggregation_directories,
    )
    try:
        _command_loop(session, source)
    except KeyboardInterrupt:
        logger.info("Interrupted; writing any active session.")
    finally:
        try:
            result_dir = session.teardown()
        except OSError as exc:
            typer.echo(f"failed to write results: {exc}", err=True)
            raise typer.Exit(code=1) from exc
    if result_dir is not None:
        typer.echo(f"results written to {result_dir}")


def _command_loop(session: RecorderSession, source: ManualFocusSource) -> None:
    while True:
        line = sys.stdin.readline()
        if not line:
            return
        command, _, argument = line.strip().partition(" ")
        if not command:
            continue
        if command == "quit":
            return
        if command == "focus":
            source.focus(argument.strip() or None)
        elif command == "blur":
            source.focus(None)
        elif command == "status":
            _print_status(session)
        elif command == "menu":
            if not _run_menu(session):
                return
        elif command in MENU_CHOICES:
            _dispatch(session, command)
        else:
            typer.echo(f"unknown command: {command}", err=True)


def _run_menu(session: RecorderSession) -> bool:
    """Prompt for a lifecycle command; False once input has run out."""
    try:
        choice = typer.prompt(f"Select a command [{'/'.join(MENU_CHOICES)}]").strip()
        confirmed = True
        if choice == "stop" and session.state is not RecordingState.STOPPED:
            confirmed = typer.confirm("Are you sure you want to stop recording?", default=False)
    except typer.Abort:
        typer.echo()
        return False
    if choice not in MENU_CHOICES:
        typer.echo(f"unknown command: {choice}", err=True)
    elif confirmed:
        _dispatch(session, choice)
    return True


def _dispatch(session: RecorderSession, command: str) -> None:
    try:
        result: CommandResult = getattr(session, command)()
    except OSError as exc:
        typer.echo(f"failed to write results: {exc}", err=True)
        return
    typer.echo(result.message if not result.accepted else CONFIRMATIONS[command])


def _print_status(session: RecorderSession) -> None:
    current = session.status()
    typer.echo(f"state: {current.state.value}")
    if current.current_file is not None:
        typer.echo(f"focused: {current.current_file} ({format_duration(current.open_seconds)})")
    for identity, seconds in current.files.items():
        typer.echo(f"  {identity:<45} {format_duration(seconds):>11}")


@app.command()
def serve(
    workspace: Optional[Path] = _WORKSPACE_OPTION,
    output_dir: Optional[Path] = _OUTPUT_OPTION,
    aggregate: Optional[List[str]] = _AGGREGATE_OPTION,
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(8766, "--port", min=1, max=65535, help="TCP port for the API."),
) -> None:
    """Accept lifecycle and focus events over HTTP."""
    from .server_runner import run_server

    settings = _load_settings(workspace, output_dir, aggregate)
    run_server(settings, host=host, port=port)


@app.command()
def summary(
    result_dir: Optional[Path] = typer.Argument(
        None, path_type=Path, help="Results directory. Defaults to the newest one."
    ),
    workspace: Optional[Path] = _WORKSPACE_OPTION,
    output_dir: Optional[Path] = _OUTPUT_OPTION,
) -> None:
    """Print the files and totals of a written session."""
    from .reporting import SummaryPrinter
    from .writer import latest_result

    if result_dir is None:
        settings = _load_settings(workspace, output_dir, None)
        result_dir = latest_result(settings.output_directory)
        if result_dir is None:
            typer.echo(f"No sessions found in {settings.output_directory}.")
            raise typer.Exit(code=1)
    SummaryPrinter(result_dir).print_summary()
