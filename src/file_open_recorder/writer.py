"""Persist session results as JSON files under the output directory."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping, Optional

logger = logging.getLogger(__name__)

RESULT_DIR_FMT = "%Y%m%d%H%M%S"
ALL_FILES_FILENAME = "all_files.json"
AGGREGATE_FILENAME = "aggregate.json"
GITIGNORE_FILENAME = ".gitignore"


class ResultWriter:
    """Writes formatted ledgers into timestamped result directories.

    Any filesystem error propagates to the caller; nothing is retried.
    """

    def __init__(
        self, output_root: Path, now: Callable[[], datetime] = datetime.now
    ) -> None:
        self.output_root = Path(output_root)
        self._now = now

    def write(self, files: Mapping[str, str], aggregate: Mapping[str, str]) -> Path:
        self.output_root.mkdir(parents=True, exist_ok=True)
        (self.output_root / GITIGNORE_FILENAME).write_text("*", encoding="utf-8")

        result_dir = self.output_root / self._now().strftime(RESULT_DIR_FMT)
        result_dir.mkdir(exist_ok=True)
        _write_json(result_dir / ALL_FILES_FILENAME, files)
        _write_json(result_dir / AGGREGATE_FILENAME, aggregate)
        logger.info("Wrote %d file entries to %s", len(files), result_dir)
        return result_dir


def latest_result(output_root: Path) -> Optional[Path]:
    """Return the newest result directory, if any exist."""
    root = Path(output_root)
    if not root.is_dir():
        return None
    candidates = [
        path for path in root.iterdir() if path.is_dir() and _is_result_name(path.name)
    ]
    return max(candidates, key=lambda path: path.name, default=None)


def _is_result_name(name: str) -> bool:
    if len(name) != 14 or not name.isdigit():
        return False
    try:
        datetime.strptime(name, RESULT_DIR_FMT)
    except ValueError:
        return False
    return True


def _write_json(path: Path, payload: Mapping[str, str]) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(dict(payload), handle, indent=2)
