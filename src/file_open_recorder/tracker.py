"""Recording state machine that attributes elapsed time to focused files."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Optional

from .aggregation import aggregate
from .focus import FocusSource, Subscription
from .models import CommandResult, RecordingState, SessionClock, SessionStatus, TimeLedger
from .normalization import to_file_identity
from .reporting import format_durations
from .writer import ResultWriter

logger = logging.getLogger(__name__)

ALREADY_STARTED = "recording has already started"
NOT_STARTED = "recording has not started"


def unix_time() -> int:
    return int(time.time())


class RecorderSession:
    """Owns the ledger, the open interval and the focus subscription.

    Events must be delivered one at a time; every handler runs to completion
    before the next one is admitted.
    """

    def __init__(
        self,
        source: FocusSource,
        writer: ResultWriter,
        *,
        workspace_root: Path,
        aggregation_directories: Iterable[str] = (),
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._source = source
        self._writer = writer
        self._workspace_root = Path(workspace_root)
        self._aggregation_directories = tuple(aggregation_directories)
        self._clock = clock or unix_time
        self._ledger = TimeLedger()
        self._session_clock = SessionClock()
        self._subscription: Optional[Subscription] = None
        self.state = RecordingState.STOPPED

    @property
    def ledger(self) -> TimeLedger:
        return self._ledger

    def start(self) -> CommandResult:
        if self.state is RecordingState.RECORDING:
            logger.info("Start ignored: %s.", ALREADY_STARTED)
            return CommandResult(False, ALREADY_STARTED)
        if self.state is RecordingState.STOPPED:
            self._ledger = TimeLedger()
            self._session_clock = SessionClock()
            logger.info("Recording started.")
        elif self.state is RecordingState.PAUSED:
            logger.info("Recording resumed.")
        self._open_interval(self._source.active_file())
        self._subscription = self._source.subscribe(self.handle_focus_change)
        self.state = RecordingState.RECORDING
        return CommandResult(True)

    def pause(self) -> CommandResult:
        if self.state is not RecordingState.RECORDING:
            logger.info("Pause ignored: %s.", NOT_STARTED)
            return CommandResult(False, NOT_STARTED)
        self._close_interval()
        self._release_subscription()
        self.state = RecordingState.PAUSED
        logger.info("Recording paused.")
        return CommandResult(True)

    def stop(self) -> CommandResult:
        if self.state is RecordingState.STOPPED:
            logger.info("Stop ignored: %s.", NOT_STARTED)
            return CommandResult(False, NOT_STARTED)
        result_dir = self._finalize()
        self._ledger.clear()
        self._session_clock.reset()
        self.state = RecordingState.STOPPED
        logger.info("Recording stopped; results in %s", result_dir)
        return CommandResult(True)

    def teardown(self) -> Optional[Path]:
        """Write results when the process ends with a session still active."""
        if self.state is RecordingState.STOPPED:
            return None
        result_dir = self._finalize()
        self.state = RecordingState.STOPPED
        return result_dir

    def handle_focus_change(self, path: Optional[str]) -> None:
        if self.state is not RecordingState.RECORDING or not self._session_clock.is_open:
            logger.debug("Ignoring focus change to %s while %s.", path, self.state.value)
            return
        self._close_interval()
        self._open_interval(path)

    def status(self) -> SessionStatus:
        return SessionStatus(
            state=self.state,
            current_file=self._session_clock.current_file,
            open_seconds=self._session_clock.elapsed(self._clock()),
            files=self._ledger.snapshot(),
        )

    def _open_interval(self, path: Optional[str]) -> None:
        identity = to_file_identity(path, self._workspace_root)
        self._ledger.ensure(identity)
        self._session_clock.open(identity, self._clock())
        logger.debug("Opened interval for %s", identity)

    def _close_interval(self) -> None:
        if not self._session_clock.is_open:
            return
        identity, seconds = self._session_clock.close(self._clock())
        self._ledger.accrue(identity, seconds)
        logger.debug("Accrued %ds to %s", seconds, identity)

    def _release_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

    def _finalize(self) -> Path:
        # The interval is closed before anything is written, and the session
        # stays paused with its ledger intact if the write fails.
        self._close_interval()
        self._release_subscription()
        self.state = RecordingState.PAUSED
        files = self._ledger.snapshot()
        totals = aggregate(files, self._aggregation_directories)
        return self._writer.write(format_durations(files), format_durations(totals))
