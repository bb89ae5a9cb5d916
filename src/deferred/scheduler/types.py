"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Scheduler abstraction: an immediate queue and a delayed queue.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..types import Task

logger = logging.getLogger("deferred.scheduler")


class Scheduler(ABC):
    """
    Two-tier cooperative scheduler.

    Immediate tasks run in FIFO order and the immediate queue is always drained
    completely before the next delayed task runs. Delayed tasks run no earlier
    than their requested delay; tasks with the same deadline keep submission
    order.
    """

    @abstractmethod
    def call_soon(self, task: Task) -> None:
        """Submit one task to the immediate queue."""
        ...

    @abstractmethod
    def call_later(self, delay_s: float, task: Task) -> None:
        """
        Submit one task to the delayed queue.

        Args:
            delay_s: Minimum delay in seconds; ``0`` means "next turn".
            task: Zero-argument callable.

        Raises:
            ValueError: If `delay_s` is negative.
        """
        ...


def run_task(task: Task) -> None:
    """Run one scheduled task, logging instead of propagating its failure."""
    try:
        task()
    except Exception:
        logger.exception("Scheduled task %r raised", task)


def check_delay(delay_s: float) -> float:
    if delay_s < 0:
        raise ValueError("delay_s must be >= 0")
    return float(delay_s)
