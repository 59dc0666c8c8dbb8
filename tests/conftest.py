"""Shared fixtures for recorder tests."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Mapping

import pytest

from file_open_recorder.focus import ManualFocusSource
from file_open_recorder.tracker import RecorderSession

WORKSPACE = Path("/work/project")


class FakeClock:
    """Manually advanced unix clock."""

    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class RecordingWriter:
    """Collects what would have been written to disk."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.writes: list[tuple[dict[str, str], dict[str, str]]] = []

    def write(self, files: Mapping[str, str], aggregate: Mapping[str, str]) -> Path:
        if self.fail:
            raise PermissionError("read-only output directory")
        self.writes.append((dict(files), dict(aggregate)))
        return Path(f"/tmp/results/{len(self.writes)}")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source() -> ManualFocusSource:
    return ManualFocusSource()


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def session(source, writer, clock) -> RecorderSession:
    return RecorderSession(
        source,
        writer,
        workspace_root=WORKSPACE,
        aggregation_directories=["src/"],
        clock=clock,
    )


@pytest.fixture
def fixed_now():
    return lambda: datetime(2024, 3, 5, 14, 7, 9)
