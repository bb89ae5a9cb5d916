"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Shared state names, event payloads and callback signatures.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from .core import Deferred

DeferredState = Literal["pending", "fulfilled", "rejected"]

PENDING: DeferredState = "pending"
FULFILLED: DeferredState = "fulfilled"
REJECTED: DeferredState = "rejected"

UnhandledPolicy = Literal["tracked", "naive"]

# Zero-argument unit of work accepted by schedulers.
Task = Callable[[], None]


def now_ms() -> int:
    """Return current Unix epoch time in milliseconds."""

    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class UnhandledRejection:
    """
    Notification emitted for a rejected deferred nobody observed.

    Attributes:
        reason: Rejection reason of the deferred.
        deferred: The rejected deferred itself.
        timestamp_ms: Unix epoch milliseconds when the check fired.
    """

    reason: Any
    deferred: "Deferred"
    timestamp_ms: int = field(default_factory=now_ms)


RejectionListener = Callable[[UnhandledRejection], None]
