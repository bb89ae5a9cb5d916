"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Scheduler backend selection.
"""

from __future__ import annotations

import asyncio

from .memory import InMemoryScheduler
from .types import Scheduler


def create_scheduler(
    backend: str = "inmemory",
    *,
    loop: asyncio.AbstractEventLoop | None = None,
) -> Scheduler:
    """
    Create a scheduler by backend name.

    Backends:
    - `inmemory` (default): deterministic, pumped by the caller
    - `asyncio`: hands work to an asyncio event loop

    Raises:
        ValueError: For an unknown backend name.
    """
    name = backend.strip().lower()
    if name in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryScheduler()
    if name in ("asyncio", "aio", "loop"):
        from .asyncio_loop import AsyncioScheduler

        return AsyncioScheduler(loop)
    raise ValueError(f"Unknown scheduler backend: {backend}")
