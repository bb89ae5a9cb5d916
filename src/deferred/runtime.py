"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Runtime bundle (scheduler, notifier, config, metrics) and the process default.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from .config import RuntimeConfig, load_config_from_env
from .metrics import DeferredMetrics, NoOpDeferredMetrics
from .notifier import RejectionNotifier
from .scheduler import InMemoryScheduler, Scheduler, create_scheduler

logger = logging.getLogger("deferred.runtime")


@dataclass(slots=True)
class DeferredRuntime:
    """
    Collaborators shared by every deferred created against this runtime.

    Attributes:
        scheduler: Immediate and delayed queues that order reactions.
        notifier: Receives unhandled-rejection events.
        config: Behaviour switches.
        metrics: Lifecycle counter sink.
    """

    scheduler: Scheduler = field(default_factory=InMemoryScheduler)
    notifier: RejectionNotifier | None = None
    config: RuntimeConfig = field(default_factory=RuntimeConfig)
    metrics: DeferredMetrics = field(default_factory=NoOpDeferredMetrics)

    def __post_init__(self) -> None:
        if self.notifier is None:
            self.notifier = RejectionNotifier(log_unhandled=self.config.log_unhandled)

    @classmethod
    def from_config(
        cls,
        config: RuntimeConfig,
        *,
        metrics: DeferredMetrics | None = None,
    ) -> DeferredRuntime:
        """Build a runtime whose scheduler backend is chosen by `config`."""
        return cls(
            scheduler=create_scheduler(config.scheduler_backend),
            config=config,
            metrics=metrics or NoOpDeferredMetrics(),
        )


def create_runtime_from_env(*, metrics: DeferredMetrics | None = None) -> DeferredRuntime:
    """Create a runtime from `DEFERRED_*` environment variables."""
    config = load_config_from_env()
    logger.debug(
        "Creating deferred runtime (scheduler=%s, unhandled_policy=%s)",
        config.scheduler_backend,
        config.unhandled_policy,
    )
    return DeferredRuntime.from_config(config, metrics=metrics)


_DEFAULT_RUNTIME: DeferredRuntime | None = None
_DEFAULT_RUNTIME_LOCK = threading.Lock()


def get_default_runtime() -> DeferredRuntime:
    """Return process-wide default runtime, creating it from the environment."""
    global _DEFAULT_RUNTIME
    if _DEFAULT_RUNTIME is not None:
        return _DEFAULT_RUNTIME
    with _DEFAULT_RUNTIME_LOCK:
        if _DEFAULT_RUNTIME is None:
            _DEFAULT_RUNTIME = create_runtime_from_env()
    return _DEFAULT_RUNTIME


def set_default_runtime(runtime: DeferredRuntime) -> None:
    """Replace the process-wide default runtime."""
    global _DEFAULT_RUNTIME
    with _DEFAULT_RUNTIME_LOCK:
        _DEFAULT_RUNTIME = runtime


def reset_default_runtime() -> None:
    """Reset default runtime singleton (for tests)."""
    global _DEFAULT_RUNTIME
    with _DEFAULT_RUNTIME_LOCK:
        _DEFAULT_RUNTIME = None
