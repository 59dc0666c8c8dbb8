"""Duration formatting and console summaries of written results."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from .writer import AGGREGATE_FILENAME, ALL_FILES_FILENAME


class SummaryPrinter:
    """Render a results directory in the console."""

    def __init__(self, result_dir: Path) -> None:
        self.result_dir = Path(result_dir)

    def print_summary(self, limit: int = 10) -> None:
        files = _load_json(self.result_dir / ALL_FILES_FILENAME)
        aggregate = _load_json(self.result_dir / AGGREGATE_FILENAME)
        if not files:
            print("No files recorded in the selected session.")
            return

        print(f"Session {self.result_dir.name}")
        print("-" * 40)
        for label, duration in aggregate.items():
            print(f"{label:<28} {duration:>11}")
        print()

        print("Top files:")
        ranked = sorted(files.items(), key=lambda item: parse_duration(item[1]), reverse=True)
        for identity, duration in ranked[:limit]:
            print(f"  {identity[:45]:<45} {duration:>11}")


def format_duration(seconds: int) -> str:
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}h {minutes:02d}m {secs:02d}s"


def format_durations(values: Mapping[str, int]) -> dict[str, str]:
    return {key: format_duration(seconds) for key, seconds in values.items()}


def parse_duration(text: str) -> int:
    """Inverse of :func:`format_duration`, used to rank written results."""
    hours, minutes, seconds = (int(part[:-1]) for part in text.split())
    return hours * 3600 + minutes * 60 + seconds


def _load_json(path: Path) -> dict[str, str]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
