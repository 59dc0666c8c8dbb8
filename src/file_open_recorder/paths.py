"""Helpers for locating application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "FileOpenRecorder"
APP_AUTHOR = "FileOpenRecorder"

OUTPUT_DIRNAME = ".fileopenrecorder"
WORKSPACE_CONFIG_FILENAME = ".fileopenrecorder.json"


def _dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)


def get_data_dir() -> Path:
    """Return the base directory for persistent data."""
    path = Path(_dirs().user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_user_config_path() -> Path:
    return Path(_dirs().user_config_path) / "config.json"


def get_log_path() -> Path:
    return get_data_dir() / "recorder.log"


def default_output_dir(workspace_root: Path) -> Path:
    return Path(workspace_root) / OUTPUT_DIRNAME


def workspace_config_path(workspace_root: Path) -> Path:
    return Path(workspace_root) / WORKSPACE_CONFIG_FILENAME
