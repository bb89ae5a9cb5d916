"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error hierarchy for deferred values and schedulers.
"""

from __future__ import annotations

from typing import Any


class DeferredError(Exception):
    """Base error for the deferred package."""


class DeferredTypeError(DeferredError, TypeError):
    """Raised when a deferred is constructed or resolved with an invalid argument."""


class InvalidStateError(DeferredError):
    """Raised when an outcome is read from a deferred that is still pending."""


class DeferredRejectedError(DeferredError):
    """
    Carries a rejection reason that is not itself an exception.

    Rejections are plain settled states, so a reason may be any object. This
    wrapper is used only at boundaries that must raise (``Deferred.result()``
    and asyncio interop).
    """

    def __init__(self, reason: Any) -> None:
        super().__init__(f"Deferred rejected with {reason!r}")
        self.reason = reason


class SchedulerStalledError(DeferredError, RuntimeError):
    """Raised when an in-memory scheduler keeps producing work past its turn budget."""
