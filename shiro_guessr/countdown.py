from __future__ import annotations

import logging
from collections.abc import Callable

from .clock import IntervalHandle, Scheduler

logger = logging.getLogger(__name__)

TICK_S = 1.0
LOW_TIME_THRESHOLD_S = 10


class CountdownTimer:
    """Cancellable one-second countdown with a single timeout notification.

    Ticks come from the injected Scheduler. Every ``start`` cancels the
    previous schedule first, so at most one tick source is live; a tick
    delivered by a stale handle is ignored.
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handle: IntervalHandle | None = None
        self._remaining_s = 0
        self._running = False
        self._subscribers: list[Callable[[], None]] = []

    @property
    def remaining_s(self) -> int:
        return self._remaining_s

    @property
    def is_running(self) -> bool:
        return self._running

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def start(self, duration_s: int) -> None:
        self.stop()
        self._remaining_s = max(0, int(duration_s))
        if self._remaining_s == 0:
            # Nothing to count down; no timeout is emitted.
            return
        self._running = True
        handle: IntervalHandle | None = None

        def on_tick() -> None:
            if handle is not self._handle:
                return
            self._tick()

        handle = self._scheduler.call_every(TICK_S, on_tick)
        self._handle = handle

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._running = False

    def reset(self) -> None:
        self.stop()
        self._remaining_s = 0

    def _tick(self) -> None:
        if not self._running or self._remaining_s <= 0:
            return
        self._remaining_s -= 1
        if self._remaining_s == 0:
            self.stop()
            logger.debug("countdown expired")
            for callback in list(self._subscribers):
                callback()


def format_time(seconds: int) -> str:
    """M:SS, e.g. 60 -> "1:00"."""

    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def is_time_low(seconds: int, threshold: int = LOW_TIME_THRESHOLD_S) -> bool:
    return seconds <= threshold
