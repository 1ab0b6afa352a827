from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol


class Clock(Protocol):
    """Monotonic clock abstraction.

    Core logic depends on this interface rather than calling real time directly.
    """

    def now(self) -> float:
        """Return monotonic seconds."""


class RealClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class IntervalHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Repeat-every-N-seconds primitive with cancellable handles."""

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> IntervalHandle: ...


class _Interval:
    def __init__(self, *, interval_s: float, callback: Callable[[], None], next_due_s: float) -> None:
        self.interval_s = interval_s
        self.callback = callback
        self.next_due_s = next_due_s
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ClockScheduler:
    """Cooperative scheduler driven by an injected Clock.

    Nothing runs on its own: the owner calls ``pump()`` once per frame and
    every interval that has come due fires synchronously on the caller's
    thread. A stalled frame catches up one tick at a time, in order.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._intervals: list[_Interval] = []

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> IntervalHandle:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        interval = _Interval(
            interval_s=float(interval_s),
            callback=callback,
            next_due_s=self._clock.now() + float(interval_s),
        )
        self._intervals.append(interval)
        return interval

    def pending(self) -> int:
        return sum(1 for i in self._intervals if not i.cancelled)

    def pump(self) -> int:
        """Fire every due callback. Returns how many callbacks ran."""

        now = self._clock.now()
        fired = 0
        # Callbacks may cancel or schedule intervals; iterate over a snapshot.
        for interval in list(self._intervals):
            while not interval.cancelled and interval.next_due_s <= now:
                interval.next_due_s += interval.interval_s
                interval.callback()
                fired += 1
        self._intervals = [i for i in self._intervals if not i.cancelled]
        return fired
