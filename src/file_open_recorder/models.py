"""Domain models for a recording session."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

INACTIVE_FILE = "other files"


class RecordingState(enum.Enum):
    STOPPED = "stopped"
    RECORDING = "recording"
    PAUSED = "paused"


@dataclass(slots=True)
class TimeLedger:
    """Accumulated seconds per file identity."""

    entries: dict[str, int] = field(default_factory=dict)

    def ensure(self, identity: str) -> None:
        self.entries.setdefault(identity, 0)

    def accrue(self, identity: str, seconds: int) -> None:
        if seconds < 0:
            raise ValueError(f"Cannot accrue negative time ({seconds}s) to {identity!r}")
        self.entries[identity] = self.entries.get(identity, 0) + seconds

    def snapshot(self) -> Mapping[str, int]:
        return MappingProxyType(dict(self.entries))

    def clear(self) -> None:
        self.entries.clear()

    @property
    def total(self) -> int:
        return sum(self.entries.values())

    def __contains__(self, identity: object) -> bool:
        return identity in self.entries

    def __getitem__(self, identity: str) -> int:
        return self.entries[identity]


@dataclass(slots=True)
class SessionClock:
    """The single open timing interval, if any."""

    current_file: Optional[str] = None
    opened_at: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.current_file is not None and self.opened_at is not None

    def open(self, identity: str, now: int) -> None:
        if self.is_open:
            raise RuntimeError(f"Interval for {self.current_file!r} is still open")
        self.current_file = identity
        self.opened_at = now

    def elapsed(self, now: int) -> int:
        opened_at = self.opened_at
        if self.current_file is None or opened_at is None:
            return 0
        delta = now - opened_at
        if delta < 0:
            logger.warning(
                "Clock moved backwards by %ds while %s was open; counting 0s.",
                -delta,
                self.current_file,
            )
            return 0
        return delta

    def close(self, now: int) -> tuple[str, int]:
        """Close the interval and return the file with its clamped duration."""
        identity = self.current_file
        if identity is None or self.opened_at is None:
            raise RuntimeError("No interval is open")
        seconds = self.elapsed(now)
        self.reset()
        return identity, seconds

    def reset(self) -> None:
        self.current_file = None
        self.opened_at = None


@dataclass(frozen=True, slots=True)
class CommandResult:
    accepted: bool
    message: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SessionStatus:
    state: RecordingState
    current_file: Optional[str]
    open_seconds: int
    files: Mapping[str, int]
