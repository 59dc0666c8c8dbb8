"""Configuration models and helpers for the recorder."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .paths import default_output_dir, get_user_config_path, workspace_config_path

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """A configuration file could not be read or validated."""


class ConfigFile(BaseModel):
    """On-disk settings, using the editor extension's key names."""

    output_directory: Optional[str] = Field(default=None, alias="outputDirectory")
    aggregation_directories: Optional[list[str]] = Field(
        default=None, alias="aggregationDirectories"
    )
    # Misspelled key accepted for settings written by older releases.
    legacy_aggregation_directories: Optional[list[str]] = Field(
        default=None, alias="aggrigationDirectories"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def directories(self) -> Optional[list[str]]:
        if self.aggregation_directories is not None:
            return self.aggregation_directories
        return self.legacy_aggregation_directories


@dataclass(slots=True)
class RecorderSettings:
    """Runtime configuration for a recording session."""

    workspace_root: Path
    output_directory: Path
    aggregation_directories: tuple[str, ...] = ()

    @classmethod
    def load(
        cls,
        workspace_root: Path,
        *,
        output_directory: Optional[Path] = None,
        aggregation_directories: Optional[Iterable[str]] = None,
        config_paths: Optional[Iterable[Path]] = None,
    ) -> "RecorderSettings":
        """Merge explicit options over config files over defaults.

        ``config_paths`` are ordered from highest to lowest precedence and
        default to the workspace file followed by the per-user file.
        """
        root = Path(workspace_root).resolve()
        if config_paths is None:
            config_paths = (workspace_config_path(root), get_user_config_path())

        output: Optional[Path] = Path(output_directory) if output_directory else None
        directories = (
            tuple(aggregation_directories) if aggregation_directories else None
        )
        for path in config_paths:
            loaded = read_config_file(path)
            if loaded is None:
                continue
            if output is None and loaded.output_directory:
                output = Path(loaded.output_directory)
            if directories is None and loaded.directories is not None:
                directories = tuple(loaded.directories)

        if output is None:
            output = default_output_dir(root)
        elif not output.is_absolute():
            output = root / output
        return cls(
            workspace_root=root,
            output_directory=output,
            aggregation_directories=directories or (),
        )


def read_config_file(path: Path) -> Optional[ConfigFile]:
    path = Path(path)
    if not path.is_file():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        config = ConfigFile.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc
    logger.debug("Loaded configuration from %s", path)
    return config
