"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Scheduler backends that order deferred reactions.
"""

from .asyncio_loop import AsyncioScheduler
from .factory import create_scheduler
from .memory import InMemoryScheduler
from .types import Scheduler

__all__ = [
    "Scheduler",
    "InMemoryScheduler",
    "AsyncioScheduler",
    "create_scheduler",
]
