"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deterministic in-memory scheduler with a virtual clock.
"""

from __future__ import annotations

import heapq
import itertools
from collections import deque

from ..errors import SchedulerStalledError
from ..types import Task
from .types import Scheduler, check_delay, run_task


class InMemoryScheduler(Scheduler):
    """
    In-process scheduler pumped explicitly by the caller.

    Suitable for tests and for embedding in hosts that own their own loop.
    Time is virtual: `now` only moves when a delayed task is run or when
    `advance()` is called, so delayed work never depends on wall-clock time.
    """

    def __init__(self) -> None:
        self._microtasks: deque[Task] = deque()
        self._timers: list[tuple[float, int, Task]] = []
        self._sequence = itertools.count()
        self._now = 0.0

    def call_soon(self, task: Task) -> None:
        """Append task to the immediate queue."""
        self._microtasks.append(task)

    def call_later(self, delay_s: float, task: Task) -> None:
        """Push task onto the timer heap, due at ``now + delay_s``."""
        due = self._now + check_delay(delay_s)
        heapq.heappush(self._timers, (due, next(self._sequence), task))

    def drain_microtasks(self) -> int:
        """
        Run immediate tasks until the queue is empty.

        Tasks submitted while draining run in the same drain.

        Returns:
            Number of tasks executed.
        """
        ran = 0
        while self._microtasks:
            task = self._microtasks.popleft()
            run_task(task)
            ran += 1
        return ran

    def run_once(self) -> bool:
        """
        Run one scheduler turn.

        A turn drains the immediate queue, then runs the earliest delayed task
        (moving the clock to its deadline when needed) and drains again.

        Returns:
            ``True`` if any task ran.
        """
        ran = self.drain_microtasks() > 0
        if not self._timers:
            return ran
        due, _, task = heapq.heappop(self._timers)
        if due > self._now:
            self._now = due
        run_task(task)
        self.drain_microtasks()
        return True

    def run_until_idle(self, *, max_turns: int = 10_000) -> int:
        """
        Run turns until both queues are empty.

        Args:
            max_turns: Upper bound on turns before giving up.

        Returns:
            Number of turns that did work.

        Raises:
            SchedulerStalledError: If work is still queued after `max_turns`.
        """
        turns = 0
        while self._microtasks or self._timers:
            if turns >= max_turns:
                raise SchedulerStalledError(
                    f"Scheduler still busy after {max_turns} turns "
                    f"({len(self._microtasks)} immediate, {len(self._timers)} delayed)"
                )
            self.run_once()
            turns += 1
        return turns

    def advance(self, seconds: float) -> int:
        """
        Move the virtual clock forward, running every delayed task that falls due.

        Returns:
            Number of delayed tasks executed.
        """
        target = self._now + check_delay(seconds)
        ran = 0
        self.drain_microtasks()
        while self._timers and self._timers[0][0] <= target:
            due, _, task = heapq.heappop(self._timers)
            self._now = max(self._now, due)
            run_task(task)
            self.drain_microtasks()
            ran += 1
        self._now = target
        return ran

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    @property
    def pending_microtasks(self) -> int:
        """Number of tasks waiting in the immediate queue."""
        return len(self._microtasks)

    @property
    def pending_timers(self) -> int:
        """Number of tasks waiting in the delayed queue."""
        return len(self._timers)
