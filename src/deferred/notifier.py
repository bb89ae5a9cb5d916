"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Observer list for unhandled-rejection notifications.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .types import RejectionListener, UnhandledRejection

logger = logging.getLogger("deferred.notifier")


class RejectionNotifier:
    """
    Publish/subscribe point for unhandled rejections.

    Listeners are called in subscription order. Notifications are advisory:
    a listener that raises is logged and the remaining listeners still run.
    """

    def __init__(self, *, log_unhandled: bool = True) -> None:
        self._listeners: list[RejectionListener] = []
        self._log_unhandled = log_unhandled

    def subscribe(self, listener: RejectionListener) -> None:
        """
        Add a listener.

        Raises:
            TypeError: If `listener` is not callable.
        """
        if not callable(listener):
            raise TypeError(f"Rejection listener {listener!r} is not callable")
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: RejectionListener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @contextmanager
    def subscription(self, listener: RejectionListener) -> Iterator[RejectionListener]:
        """Keep `listener` subscribed for the duration of a ``with`` block."""
        self.subscribe(listener)
        try:
            yield listener
        finally:
            self.unsubscribe(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: UnhandledRejection) -> None:
        """Deliver one event to every listener, or log it when nobody listens."""
        if not self._listeners:
            if self._log_unhandled:
                logger.warning(
                    "Unhandled rejection in %r: %r", event.deferred, event.reason
                )
            return
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Rejection listener %r raised", listener)


class RejectionRecorder:
    """
    Listener that keeps rejection reasons in arrival order.

    Each deferred is recorded at most once, so a harness that receives the
    same event twice still sees one entry.
    """

    def __init__(self) -> None:
        self._events: list[UnhandledRejection] = []
        self._seen: set[int] = set()

    def __call__(self, event: UnhandledRejection) -> None:
        key = id(event.deferred)
        if key in self._seen:
            return
        self._seen.add(key)
        self._events.append(event)

    @property
    def events(self) -> list[UnhandledRejection]:
        return list(self._events)

    @property
    def reasons(self) -> list[Any]:
        return [event.reason for event in self._events]

    def clear(self) -> None:
        self._events.clear()
        self._seen.clear()
