"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics interface and adapters for deferred lifecycle counters.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

CREATED = "deferred_created"
SETTLED = "deferred_settled"
UNHANDLED = "deferred_unhandled_rejections"


class DeferredMetrics(Protocol):
    """Minimal metrics interface for deferred instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpDeferredMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


# Label names each lifecycle counter accepts, and the values a label may take.
COUNTER_LABELS: dict[str, dict[str, tuple[str, ...]]] = {
    CREATED: {},
    SETTLED: {"state": ("fulfilled", "rejected")},
    UNHANDLED: {},
}

_DESCRIPTIONS = {
    CREATED: "Deferred values constructed",
    SETTLED: "Deferred values settled, by terminal state",
    UNHANDLED: "Rejected deferred values reported as unhandled",
}


class PrometheusDeferredMetrics:
    """
    Prometheus-backed deferred metrics adapter.

    Counters are registered up front from `COUNTER_LABELS`, so every series a
    runtime can emit exists from the first scrape. `incr` only accepts those
    counter names with exactly their declared labels; anything else is a
    programming error and raises ``ValueError`` instead of silently creating
    a new series.

    Requires `prometheus_client` package.
    """

    def __init__(self, *, namespace: str = "deferred", registry: object | None = None) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusDeferredMetrics requires `prometheus_client` to be installed."
            ) from exc

        target = registry if registry is not None else REGISTRY
        self._counters = {
            name: Counter(
                name=name,
                documentation=_DESCRIPTIONS[name],
                namespace=namespace,
                labelnames=tuple(labels),
                registry=target,
            )
            for name, labels in COUNTER_LABELS.items()
        }

    def incr(self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None) -> None:
        allowed = COUNTER_LABELS.get(name)
        if allowed is None:
            raise ValueError(f"Unknown deferred metric '{name}'")
        given = dict(tags or {})
        if set(given) != set(allowed):
            raise ValueError(
                f"Metric '{name}' expects labels {sorted(allowed)}, got {sorted(given)}"
            )
        for label, label_value in given.items():
            if label_value not in allowed[label]:
                raise ValueError(f"Invalid {label}={label_value!r} for metric '{name}'")

        counter = self._counters[name]
        if allowed:
            counter.labels(**given).inc(value)
        else:
            counter.inc(value)
