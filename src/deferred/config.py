"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Runtime configuration model and environment loading.
"""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .types import UnhandledPolicy

SchedulerBackend = Literal["inmemory", "asyncio"]

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


class RuntimeConfig(BaseModel):
    """
    Behaviour switches shared by every deferred bound to one runtime.

    Attributes:
        scheduler_backend: Scheduler used when a runtime is built from config.
        unhandled_policy: ``tracked`` reports only rejections with no attached
            continuation; ``naive`` reports any value still rejected one turn
            after construction.
        trap_executor_errors: Convert exceptions raised by an executor into a
            rejection instead of letting them escape the constructor.
        unhandled_check_delay_s: Delay passed to the delayed queue for the
            unhandled-rejection check.
        log_unhandled: Log unhandled rejections when no listener is subscribed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scheduler_backend: SchedulerBackend = "inmemory"
    unhandled_policy: UnhandledPolicy = "tracked"
    trap_executor_errors: bool = False
    unhandled_check_delay_s: float = Field(default=0.0, ge=0.0)
    log_unhandled: bool = True


def _env_first(*names: str, default: str | None = None) -> str | None:
    """
    Return the first non-empty environment variable in `names`.

    Args:
        *names: Environment variable names to check in order.
        default: Value returned if no non-empty variable is found.
    """
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


def _env_bool(name: str, *, default: bool) -> bool:
    raw = _env_first(name)
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw}")


def _normalize_backend(raw: str) -> str:
    lowered = raw.strip().lower()
    if lowered in ("mem", "memory", "inmemory", "in_memory"):
        return "inmemory"
    if lowered in ("asyncio", "aio", "loop"):
        return "asyncio"
    return lowered


def load_config_from_env() -> RuntimeConfig:
    """
    Build a `RuntimeConfig` from `DEFERRED_*` environment variables.

    Variables:
    - `DEFERRED_SCHEDULER_BACKEND`: `inmemory` (default) or `asyncio`
    - `DEFERRED_UNHANDLED_POLICY`: `tracked` (default) or `naive`
    - `DEFERRED_TRAP_EXECUTOR_ERRORS`: boolean, default false
    - `DEFERRED_UNHANDLED_CHECK_DELAY_S`: float seconds, default 0
    - `DEFERRED_LOG_UNHANDLED`: boolean, default true

    Raises:
        pydantic.ValidationError: When a value is outside its allowed set.
        ValueError: When a boolean or float variable cannot be parsed.
    """
    backend = _env_first("DEFERRED_SCHEDULER_BACKEND", default="inmemory") or "inmemory"
    policy = _env_first("DEFERRED_UNHANDLED_POLICY", default="tracked") or "tracked"
    delay = float(_env_first("DEFERRED_UNHANDLED_CHECK_DELAY_S", default="0") or "0")
    return RuntimeConfig(
        scheduler_backend=_normalize_backend(backend),
        unhandled_policy=policy.strip().lower(),
        trap_executor_errors=_env_bool("DEFERRED_TRAP_EXECUTOR_ERRORS", default=False),
        unhandled_check_delay_s=delay,
        log_unhandled=_env_bool("DEFERRED_LOG_UNHANDLED", default=True),
    )
