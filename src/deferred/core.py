"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deferred value: a settle-once state machine with chaining and adoption.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from types import TracebackType
from typing import Any

from .errors import DeferredRejectedError, DeferredTypeError, InvalidStateError
from .metrics import CREATED, SETTLED, UNHANDLED
from .runtime import DeferredRuntime, get_default_runtime
from .types import FULFILLED, PENDING, REJECTED, DeferredState, Task, UnhandledRejection

logger = logging.getLogger("deferred.core")

Fulfill = Callable[..., None]
Reject = Callable[..., None]
Executor = Callable[[Fulfill, Reject], Any]
Handler = Callable[[Any], Any]


def _leave_pending(fulfill: Fulfill, reject: Reject) -> None:
    """Executor for internally driven values; settlement happens later."""
    _ = fulfill
    _ = reject


class Deferred:
    """
    A value that settles exactly once to fulfilled or rejected.

    The executor runs synchronously inside the constructor and receives two
    capabilities, ``fulfill(value)`` and ``reject(reason)``. The first call to
    either one wins; later calls are ignored. Fulfilling with another
    ``Deferred`` adopts that value's eventual outcome.

    Reactions registered with `then`, `catch` and `finally_` always run on the
    runtime's immediate queue, never synchronously inside the registering call.

    Example::

        runtime = DeferredRuntime()
        d = Deferred(lambda fulfill, reject: fulfill(21), runtime=runtime)
        doubled = d.then(lambda value: value * 2)
        runtime.scheduler.run_until_idle()
        assert doubled.result() == 42
    """

    def __init__(self, executor: Executor, *, runtime: DeferredRuntime | None = None) -> None:
        if executor is None:
            raise DeferredTypeError("Deferred executor None is not callable")
        if not callable(executor):
            raise DeferredTypeError(f"Deferred executor {executor!r} is not callable")

        self._runtime = runtime or get_default_runtime()
        self._state: DeferredState = PENDING
        self._payload: Any = None
        self._locked = False
        self._handled = False
        self._check_ran = False
        self._reported = False
        self._waiters: list[Task] = []
        self._reason_traceback: TracebackType | None = None
        self._runtime.metrics.incr(CREATED)

        if self._runtime.config.trap_executor_errors:
            try:
                executor(self._fulfill, self._reject)
            except Exception as exc:
                logger.debug("Executor of %r raised; rejecting", self, exc_info=True)
                self._reject(exc)
        else:
            executor(self._fulfill, self._reject)

        self._runtime.scheduler.call_later(
            self._runtime.config.unhandled_check_delay_s, self._check_unhandled
        )

    # ------------------------------------------------------------------
    # Static constructors
    # ------------------------------------------------------------------

    @classmethod
    def resolve(cls, value: Any = None, *, runtime: DeferredRuntime | None = None) -> Deferred:
        """Return `value` unchanged if it is a Deferred, else a fulfilled Deferred."""
        if isinstance(value, Deferred):
            return value
        return cls(lambda fulfill, _reject: fulfill(value), runtime=runtime)

    @classmethod
    def reject(cls, reason: Any = None, *, runtime: DeferredRuntime | None = None) -> Deferred:
        """Return a Deferred already rejected with `reason`."""
        return cls(lambda _fulfill, reject: reject(reason), runtime=runtime)

    @classmethod
    def all(cls, items: Iterable[Any], *, runtime: DeferredRuntime | None = None) -> Deferred:
        """Aggregate `items`; see `deferred.combinators.gather_all`."""
        from .combinators import gather_all

        return gather_all(items, runtime=runtime)

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def _fulfill(self, value: Any = None) -> None:
        if self._locked:
            return
        self._locked = True
        self._resolve(value)

    def _reject(self, reason: Any = None) -> None:
        if self._locked:
            return
        self._locked = True
        self._settle(REJECTED, reason)

    def _resolve(self, value: Any) -> None:
        """Fulfill with a plain value, or adopt the outcome of a Deferred."""
        if value is self:
            self._settle(REJECTED, DeferredTypeError("Deferred cannot be resolved with itself"))
        elif isinstance(value, Deferred):
            self._adopt(value)
        else:
            self._settle(FULFILLED, value)

    def _adopt(self, other: Deferred) -> None:
        other._handled = True
        if other._state != PENDING:
            self._settle(other._state, other._payload)
            return
        logger.debug("%r adopting pending %r", self, other)
        other._on_settled(lambda: self._settle(other._state, other._payload))

    def _settle(self, state: DeferredState, payload: Any) -> None:
        if self._state != PENDING:
            return
        self._state = state
        self._payload = payload
        if isinstance(payload, BaseException):
            self._reason_traceback = payload.__traceback__
        self._runtime.metrics.incr(SETTLED, tags={"state": state})

        waiters, self._waiters = self._waiters, []
        scheduler = self._runtime.scheduler
        for waiter in waiters:
            scheduler.call_soon(waiter)

        config = self._runtime.config
        if state == REJECTED and self._check_ran and config.unhandled_policy == "tracked":
            scheduler.call_later(config.unhandled_check_delay_s, self._check_unhandled)

    def _on_settled(self, waiter: Task) -> None:
        """Run `waiter` on the immediate queue once this value settles."""
        self._handled = True
        if self._state == PENDING:
            self._waiters.append(waiter)
        else:
            self._runtime.scheduler.call_soon(waiter)

    def _derive(self) -> Deferred:
        return Deferred(_leave_pending, runtime=self._runtime)

    # ------------------------------------------------------------------
    # Unhandled rejections
    # ------------------------------------------------------------------

    def _check_unhandled(self) -> None:
        self._check_ran = True
        if self._state != REJECTED or self._reported:
            return
        if self._runtime.config.unhandled_policy == "tracked" and self._handled:
            return
        self._reported = True
        self._runtime.metrics.incr(UNHANDLED)
        self._runtime.notifier.publish(UnhandledRejection(reason=self._payload, deferred=self))

    # ------------------------------------------------------------------
    # Chaining
    # ------------------------------------------------------------------

    def then(
        self,
        on_fulfilled: Handler | None = None,
        on_rejected: Handler | None = None,
    ) -> Deferred:
        """
        Chain handlers and return a new Deferred for their outcome.

        Missing (or non-callable) handlers pass the outcome through unchanged,
        so a rejection keeps travelling down the chain until a rejection
        handler intercepts it. A handler that raises rejects the derived value
        with the raised exception; a handler that returns a Deferred makes the
        derived value adopt it.
        """
        if not callable(on_fulfilled):
            on_fulfilled = None
        if not callable(on_rejected):
            on_rejected = None
        derived = self._derive()

        def react() -> None:
            handler = on_fulfilled if self._state == FULFILLED else on_rejected
            if handler is None:
                derived._settle(self._state, self._payload)
                return
            try:
                result = handler(self._payload)
            except Exception as exc:
                derived._settle(REJECTED, exc)
                return
            derived._resolve(result)

        self._on_settled(react)
        return derived

    def catch(self, on_rejected: Handler | None = None) -> Deferred:
        """Shorthand for ``then(None, on_rejected)``."""
        return self.then(None, on_rejected)

    def finally_(self, on_finally: Callable[[], Any] | None = None) -> Deferred:
        """
        Run `on_finally` (with no arguments) once this value settles.

        The derived value keeps this value's outcome, unless `on_finally`
        raises or returns a Deferred that rejects; that failure then replaces
        the original outcome.
        """
        if not callable(on_finally):
            on_finally = None
        derived = self._derive()

        def keep_original() -> None:
            derived._settle(self._state, self._payload)

        def react() -> None:
            if on_finally is None:
                keep_original()
                return
            try:
                result = on_finally()
            except Exception as exc:
                derived._settle(REJECTED, exc)
                return
            if not isinstance(result, Deferred):
                keep_original()
                return

            def after() -> None:
                if result._state == REJECTED:
                    derived._settle(REJECTED, result._payload)
                else:
                    keep_original()

            if result._state == PENDING:
                result._on_settled(after)
            else:
                result._handled = True
                after()

        self._on_settled(react)
        return derived

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> DeferredState:
        return self._state

    @property
    def payload(self) -> Any:
        """Settled value or reason; ``None`` while pending."""
        return self._payload

    @property
    def runtime(self) -> DeferredRuntime:
        return self._runtime

    @property
    def is_pending(self) -> bool:
        return self._state == PENDING

    @property
    def is_fulfilled(self) -> bool:
        return self._state == FULFILLED

    @property
    def is_rejected(self) -> bool:
        return self._state == REJECTED

    def result(self) -> Any:
        """
        Return the fulfilled value.

        Raises:
            InvalidStateError: While pending.
            Exception: The rejection reason, when it is an exception.
            DeferredRejectedError: When the rejection reason is not an exception.

        Repeated calls raise the reason with the traceback it had when the
        value settled, so frames do not pile up across calls.
        """
        error = self.exception()
        if error is None:
            return self._payload
        if error is self._payload:
            raise error.with_traceback(self._reason_traceback)
        raise error

    def exception(self) -> Exception | None:
        """
        Return the rejection as an exception, or ``None`` if fulfilled.

        Reading a rejection counts as handling it.

        Raises:
            InvalidStateError: While pending.
        """
        if self._state == PENDING:
            raise InvalidStateError(f"{self!r} is still pending")
        if self._state == FULFILLED:
            return None
        self._handled = True
        if isinstance(self._payload, Exception):
            return self._payload
        return DeferredRejectedError(self._payload)

    def __repr__(self) -> str:
        if self._state == PENDING:
            return "<Deferred pending>"
        return f"<Deferred {self._state} {self._payload!r}>"
