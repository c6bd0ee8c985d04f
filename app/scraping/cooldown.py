"""
Post-run cooldown counter.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from functools import partial

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


def _daemon_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class CooldownTimer:
    """
    Counts down whole seconds after a run; new runs are rejected while positive.

    A one-shot timer is re-armed after every tick and cancelled once the
    counter reaches zero, so nothing runs while the pipeline is idle.
    """

    def __init__(
        self,
        *,
        tick_seconds: float = 1.0,
        timer_factory: TimerFactory = _daemon_timer,
    ) -> None:
        self._tick_seconds = tick_seconds
        self._timer_factory = timer_factory
        self._remaining = 0
        self._generation = 0
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def remaining(self) -> int:
        with self._lock:
            return self._remaining

    @property
    def active(self) -> bool:
        return self.remaining > 0

    def start(self, seconds: int) -> None:
        """
        Reset the counter to `seconds` and (re)start ticking.
        """

        with self._lock:
            self._cancel_locked()
            self._generation += 1
            self._remaining = max(0, int(seconds))
            if self._remaining > 0:
                self._arm_locked()

    def tick(self, generation: int | None = None) -> None:
        """
        Decrement once. Ticks armed before the latest start/cancel are ignored.
        """

        with self._lock:
            if generation is not None and generation != self._generation:
                return
            self._timer = None
            if self._remaining <= 0:
                return
            self._remaining -= 1
            if self._remaining > 0:
                self._arm_locked()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            self._remaining = 0

    def _arm_locked(self) -> None:
        self._timer = self._timer_factory(self._tick_seconds, partial(self.tick, self._generation))
        self._timer.start()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
