from __future__ import annotations

import asyncio
import enum
import logging
import random
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL_MS = 1500.0
DEFAULT_INTERVAL_JITTER_MS = 1500.0


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """The slice of ``asyncio.AbstractEventLoop`` the clock relies on."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


class ClockState(str, enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class RecurringSchedule:
    """A fixed-period timer that owns exactly one pending handle.

    The period is chosen at construction and never changes. ``cancel`` drops
    the pending handle, so a cancelled schedule cannot fire again. Usable as a
    context manager: entering arms the timer, leaving cancels it.
    """

    def __init__(self, loop: Scheduler, period_ms: float, callback: Callable[[], None]) -> None:
        if period_ms <= 0:
            raise ValueError("period_ms must be > 0")
        self.period_ms = period_ms
        self.ticks = 0
        self._loop = loop
        self._callback = callback
        self._handle: TimerHandle | None = None
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._cancelled

    def open(self) -> None:
        if self._cancelled:
            raise RuntimeError("Cancelled schedules cannot be reopened")
        if self._handle is None:
            self._arm()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def __enter__(self) -> RecurringSchedule:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self.period_ms / 1000.0, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        # Re-arm first so the callback may cancel the next tick.
        self._arm()
        self.ticks += 1
        self._callback()


class SimulationClock:
    def __init__(
        self,
        on_tick: Callable[[], None],
        loop: Scheduler | None = None,
        rng: random.Random | None = None,
        min_interval_ms: float = DEFAULT_MIN_INTERVAL_MS,
        interval_jitter_ms: float = DEFAULT_INTERVAL_JITTER_MS,
    ) -> None:
        if min_interval_ms <= 0:
            raise ValueError("min_interval_ms must be > 0")
        if interval_jitter_ms < 0:
            raise ValueError("interval_jitter_ms must be >= 0")
        self.min_interval_ms = min_interval_ms
        self.interval_jitter_ms = interval_jitter_ms
        self._on_tick = on_tick
        self._loop = loop if loop is not None else asyncio.get_running_loop()
        self._random = rng if rng is not None else random.Random()
        self._schedule: RecurringSchedule | None = None

    @property
    def state(self) -> ClockState:
        return ClockState.RUNNING if self._schedule is not None else ClockState.STOPPED

    @property
    def running(self) -> bool:
        return self._schedule is not None

    @property
    def period_ms(self) -> float | None:
        return self._schedule.period_ms if self._schedule is not None else None

    def draw_period_ms(self) -> float:
        return self.min_interval_ms + self._random.random() * self.interval_jitter_ms

    def start(self) -> bool:
        if self._schedule is not None:
            logger.debug("Clock already running; start ignored")
            return False
        schedule = RecurringSchedule(self._loop, self.draw_period_ms(), self._on_tick)
        schedule.open()
        self._schedule = schedule
        logger.info("Simulation clock started with period %.1f ms", schedule.period_ms)
        return True

    def stop(self) -> bool:
        if self._schedule is None:
            logger.debug("Clock already stopped; stop ignored")
            return False
        schedule, self._schedule = self._schedule, None
        schedule.cancel()
        logger.info("Simulation clock stopped after %s ticks", schedule.ticks)
        return True

    def restart(self) -> None:
        self.stop()
        self.start()
