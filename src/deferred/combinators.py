"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Aggregation over many deferred values, plus module-level constructors.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .core import Deferred, _leave_pending
from .runtime import DeferredRuntime
from .types import FULFILLED, REJECTED


def resolve(value: Any = None, *, runtime: DeferredRuntime | None = None) -> Deferred:
    """Module-level alias for `Deferred.resolve`."""
    return Deferred.resolve(value, runtime=runtime)


def reject(reason: Any = None, *, runtime: DeferredRuntime | None = None) -> Deferred:
    """Module-level alias for `Deferred.reject`."""
    return Deferred.reject(reason, runtime=runtime)


def gather_all(items: Iterable[Any], *, runtime: DeferredRuntime | None = None) -> Deferred:
    """
    Wait for every item and settle once all of them have settled.

    Plain values are wrapped with `Deferred.resolve`. When every item
    fulfills, the result is a list of their values in input order. When one
    or more reject, the result rejects with the reason of the first rejected
    item by position, not by the time it rejected. An empty input fulfills
    with ``[]`` straight away.

    Without an explicit `runtime`, the aggregate joins the runtime of the
    first ``Deferred`` among `items` and only falls back to the process
    default when there is none.
    """
    items = list(items)
    if runtime is None:
        runtime = next(
            (item.runtime for item in items if isinstance(item, Deferred)), None
        )
    members = [Deferred.resolve(item, runtime=runtime) for item in items]
    aggregate = Deferred(_leave_pending, runtime=runtime)
    if not members:
        aggregate._settle(FULFILLED, [])
        return aggregate

    remaining = len(members)

    def on_member_settled() -> None:
        nonlocal remaining
        remaining -= 1
        if remaining:
            return
        for member in members:
            if member.state == REJECTED:
                aggregate._settle(REJECTED, member.payload)
                return
        aggregate._settle(FULFILLED, [member.payload for member in members])

    for member in members:
        member._on_settled(on_member_settled)
    return aggregate
