"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deferred values with chaining, adoption and aggregation on a two-tier
cooperative scheduler.

Quick start::

    from deferred import Deferred, DeferredRuntime, RejectionRecorder

    runtime = DeferredRuntime()
    recorder = RejectionRecorder()
    runtime.notifier.subscribe(recorder)

    total = Deferred.all(
        [Deferred.resolve(1, runtime=runtime), 2, Deferred.resolve(3, runtime=runtime)],
        runtime=runtime,
    ).then(sum)
    runtime.scheduler.run_until_idle()
    print(total.result())  # 6
"""

from .combinators import gather_all, reject, resolve
from .config import RuntimeConfig, load_config_from_env
from .core import Deferred
from .errors import (
    DeferredError,
    DeferredRejectedError,
    DeferredTypeError,
    InvalidStateError,
    SchedulerStalledError,
)
from .interop import as_future
from .metrics import DeferredMetrics, NoOpDeferredMetrics, PrometheusDeferredMetrics
from .notifier import RejectionNotifier, RejectionRecorder
from .runtime import (
    DeferredRuntime,
    create_runtime_from_env,
    get_default_runtime,
    reset_default_runtime,
    set_default_runtime,
)
from .scheduler import AsyncioScheduler, InMemoryScheduler, Scheduler, create_scheduler
from .types import DeferredState, UnhandledRejection

__all__ = [
    "Deferred",
    "DeferredState",
    "resolve",
    "reject",
    "gather_all",
    "as_future",
    "DeferredRuntime",
    "RuntimeConfig",
    "load_config_from_env",
    "create_runtime_from_env",
    "get_default_runtime",
    "set_default_runtime",
    "reset_default_runtime",
    "Scheduler",
    "InMemoryScheduler",
    "AsyncioScheduler",
    "create_scheduler",
    "RejectionNotifier",
    "RejectionRecorder",
    "UnhandledRejection",
    "DeferredMetrics",
    "NoOpDeferredMetrics",
    "PrometheusDeferredMetrics",
    "DeferredError",
    "DeferredTypeError",
    "InvalidStateError",
    "DeferredRejectedError",
    "SchedulerStalledError",
]
