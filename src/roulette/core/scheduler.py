"""Tick scheduling capability injected into the animators.

The animators never touch a global timer. They ask a scheduler for the
current time and to run a callback later; each callback runs to
completion before the next one is dispatched.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol
import asyncio
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Host-provided clock plus one-shot timers."""

    def time(self) -> float:
        """Monotonic time in seconds."""
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""
        ...


@dataclass(order=True)
class _Timer:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual clock driven explicitly by ``advance()``.

    Used by tests and offline simulation. Timers fire in due-time order,
    ties in the order they were scheduled; the clock reads the timer's
    due time while its callback runs.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[_Timer] = []
        self._counter = itertools.count()

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> _Timer:
        timer = _Timer(self._now + max(0.0, delay), next(self._counter), callback)
        heapq.heappush(self._queue, timer)
        return timer

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) timers."""
        return sum(1 for t in self._queue if not t.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every timer that comes due.

        Returns:
            Number of callbacks run
        """
        return self._advance_to(self._now + max(0.0, seconds))

    def _advance_to(self, target: float) -> int:
        fired = 0
        while self._queue and self._queue[0].due <= target:
            timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = timer.due
            timer.callback()
            fired += 1
        self._now = target
        return fired

    def run_until_idle(self, max_seconds: float = 60.0) -> int:
        """Fire timers until none remain or ``max_seconds`` pass."""
        deadline = self._now + max_seconds
        fired = 0
        while True:
            live = [t for t in self._queue if not t.cancelled]
            if not live:
                break
            next_due = min(t.due for t in live)
            if next_due > deadline:
                self._now = deadline
                logger.warning(f"Scheduler still busy after {max_seconds}s")
                break
            fired += self._advance_to(next_due)
        return fired


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def time(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)
