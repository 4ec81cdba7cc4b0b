"""Spacing of creation calls to stay under GitHub's abuse detection."""

from __future__ import annotations

import time
from collections.abc import Callable

DEFAULT_INTERVAL = 0.1  # seconds


class Throttle:
    """Enforces a minimum interval between consecutive calls to ``wait``.

    The engine calls ``wait`` after each issue creation and each item
    placement, so no more than one such call completes per ``interval``.
    """

    def __init__(
        self,
        interval: float = DEFAULT_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval < 0:
            raise ValueError("Throttle interval must not be negative")
        self.interval = interval
        self._sleep = sleep
        self._clock = clock
        self._last: float | None = None

    @classmethod
    def disabled(cls) -> Throttle:
        """A throttle that never sleeps."""
        return cls(interval=0.0)

    def wait(self) -> None:
        """Sleep until ``interval`` has passed since the previous call."""
        now = self._clock()
        if self._last is not None and self.interval > 0:
            remaining = self.interval - (now - self._last)
            if remaining > 0:
                self._sleep(remaining)
                now = self._clock()
        self._last = now
