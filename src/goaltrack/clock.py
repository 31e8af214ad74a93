# src/goaltrack/clock.py
"""
Nanosecond clocks used to stamp ``created_at``/``updated_at``.
"""

import time
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Returns the current time as integer nanoseconds."""

    def now_ns(self) -> int: ...


class SystemClock:
    """
    Wall-clock nanoseconds that never go backwards within one instance.

    ``time.time_ns()`` can step back on NTP adjustments; readings are clamped to
    the last value returned so that ``updated_at`` never precedes ``created_at``.
    """

    def __init__(self, source: Callable[[], int] = time.time_ns) -> None:
        self._source = source
        self._last = 0

    def now_ns(self) -> int:
        now = self._source()
        if now < self._last:
            now = self._last
        self._last = now
        return now


class ManualClock:
    """
    Deterministic clock for tests and replays.

    Each reading returns the current value and then advances it by ``step``.

    Example:
        >>> clock = ManualClock(start=1_000, step=10)
        >>> clock.now_ns(), clock.now_ns()
        (1000, 1010)
    """

    def __init__(self, start: int = 1_700_000_000_000_000_000, step: int = 1_000) -> None:
        if step < 0:
            raise ValueError("ManualClock step must be non-negative")
        self._now = start
        self._step = step

    def now_ns(self) -> int:
        now = self._now
        self._now += self._step
        return now

    def peek(self) -> int:
        """Next value ``now_ns`` will return, without advancing."""
        return self._now

    def advance(self, nanoseconds: int) -> None:
        if nanoseconds < 0:
            raise ValueError("Cannot move a ManualClock backwards")
        self._now += nanoseconds
