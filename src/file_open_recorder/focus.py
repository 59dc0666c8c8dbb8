"""Sources of focus-change notifications."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

FocusCallback = Callable[[Optional[str]], None]


class Subscription:
    """Handle for a registered focus callback; dispose to stop delivery."""

    def __init__(self, release: Callable[[], None]) -> None:
        self._release: Optional[Callable[[], None]] = release

    @property
    def active(self) -> bool:
        return self._release is not None

    def dispose(self) -> None:
        release, self._release = self._release, None
        if release is not None:
            release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()


class FocusSource(Protocol):
    def active_file(self) -> Optional[str]:
        ...

    def subscribe(self, callback: FocusCallback) -> Subscription:
        ...


class ManualFocusSource:
    """Focus source driven by explicit calls from the CLI or HTTP surface."""

    def __init__(self, initial: Optional[str] = None) -> None:
        self._active = initial
        self._callbacks: list[FocusCallback] = []

    def active_file(self) -> Optional[str]:
        return self._active

    def subscribe(self, callback: FocusCallback) -> Subscription:
        self._callbacks.append(callback)
        return Subscription(lambda: self._unsubscribe(callback))

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def focus(self, path: Optional[str]) -> None:
        """Move focus to ``path`` (``None`` for a non-file panel) and notify."""
        self._active = path or None
        logger.debug("Focus moved to %s", self._active)
        for callback in list(self._callbacks):
            callback(self._active)

    def _unsubscribe(self, callback: FocusCallback) -> None:
        try:
            self._callbacks.remove(callback)
        except ValueError:
            logger.debug("Focus callback was already removed.")
