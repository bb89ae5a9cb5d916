"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Bridge from deferred values to asyncio futures.
"""

from __future__ import annotations

import asyncio
from typing import Any

from .core import Deferred
from .errors import DeferredRejectedError


def as_future(
    deferred: Deferred,
    *,
    loop: asyncio.AbstractEventLoop | None = None,
) -> asyncio.Future[Any]:
    """
    Return an asyncio future that mirrors `deferred`'s outcome.

    Non-exception rejection reasons are wrapped in `DeferredRejectedError`.
    The deferred's runtime must be driven by something that runs while the
    caller awaits, normally an `AsyncioScheduler` on the same loop.
    """
    loop = loop or asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()

    def on_fulfilled(value: Any) -> None:
        if not future.done():
            future.set_result(value)

    def on_rejected(reason: Any) -> None:
        if future.done():
            return
        if isinstance(reason, Exception):
            future.set_exception(reason)
        else:
            future.set_exception(DeferredRejectedError(reason))

    deferred.then(on_fulfilled, on_rejected)
    return future
