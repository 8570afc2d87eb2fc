"""Countdown clock for a timed exam session."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CountdownTimer:
    """Remaining-seconds counter advanced by one-second ticks.

    The timer does not own a thread; a driver (a Qt ``QTimer`` in the desktop
    app, a plain loop in tests) calls :meth:`tick` once per second. Ticks are
    ignored unless the timer is running, so stopping it is the only
    cancellation needed.
    """

    def __init__(self, max_seconds: int, on_expired: Callable[[], None] | None = None) -> None:
        self._max_seconds = max_seconds
        self._remaining = max_seconds
        self._running = False
        self._expired = False
        self._on_expired = on_expired

    @property
    def max_seconds(self) -> int:
        return self._max_seconds

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def elapsed_seconds(self) -> int:
        return max(0, self._max_seconds - self._remaining)

    def is_running(self) -> bool:
        return self._running

    def has_expired(self) -> bool:
        return self._expired

    def reset(self, max_seconds: int | None = None) -> None:
        if max_seconds is not None:
            self._max_seconds = max_seconds
        self._remaining = self._max_seconds
        self._running = False
        self._expired = False

    def start(self) -> None:
        if self._expired or self._remaining <= 0:
            return
        self._running = True

    def stop(self) -> None:
        self._running = False

    def tick(self) -> bool:
        """Advance one second. Returns True on the tick that reaches zero."""
        if not self._running or self._remaining <= 0:
            return False
        self._remaining -= 1
        if self._remaining > 0:
            return False
        self._running = False
        self._expired = True
        logger.info("Countdown reached zero after %d seconds", self._max_seconds)
        if self._on_expired is not None:
            self._on_expired()
        return True
