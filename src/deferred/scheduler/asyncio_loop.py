"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Scheduler backed by a running asyncio event loop.
"""

from __future__ import annotations

import asyncio
from collections import deque

from ..types import Task
from .types import Scheduler, check_delay, run_task


class AsyncioScheduler(Scheduler):
    """
    Scheduler that hands work to an ``asyncio`` event loop.

    Immediate tasks are buffered here and drained inside one loop callback, so
    a burst of chained reactions never interleaves with other loop work.
    Delayed tasks use ``loop.call_later`` and drain the immediate queue right
    after they run.

    When `loop` is omitted the running loop is looked up on every submission,
    which raises ``RuntimeError`` outside a running loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._microtasks: deque[Task] = deque()
        self._drain_scheduled = False

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def call_soon(self, task: Task) -> None:
        loop = self._get_loop()
        self._microtasks.append(task)
        if not self._drain_scheduled:
            loop.call_soon(self._drain)
            self._drain_scheduled = True

    def call_later(self, delay_s: float, task: Task) -> None:
        self._get_loop().call_later(check_delay(delay_s), self._run_delayed, task)

    def _drain(self) -> None:
        try:
            self._drain_inline()
        finally:
            self._drain_scheduled = False

    def _run_delayed(self, task: Task) -> None:
        # immediate work queued earlier in this loop iteration goes first;
        # a drain already queued on the loop will find nothing left to do
        self._drain_inline()
        run_task(task)
        self._drain_inline()

    def _drain_inline(self) -> None:
        while self._microtasks:
            run_task(self._microtasks.popleft())

    @property
    def pending_microtasks(self) -> int:
        """Number of buffered immediate tasks."""
        return len(self._microtasks)
