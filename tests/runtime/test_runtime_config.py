from __future__ import annotations

import pydantic
import pytest

from deferred import (
    AsyncioScheduler,
    Deferred,
    DeferredRuntime,
    InMemoryScheduler,
    RejectionNotifier,
    RuntimeConfig,
    create_runtime_from_env,
    get_default_runtime,
    load_config_from_env,
    reset_default_runtime,
    set_default_runtime,
)

_ENV_NAMES = (
    "DEFERRED_SCHEDULER_BACKEND",
    "DEFERRED_UNHANDLED_POLICY",
    "DEFERRED_TRAP_EXECUTOR_ERRORS",
    "DEFERRED_UNHANDLED_CHECK_DELAY_S",
    "DEFERRED_LOG_UNHANDLED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    reset_default_runtime()
    yield
    reset_default_runtime()


def test_config_defaults_from_empty_env():
    config = load_config_from_env()

    assert config == RuntimeConfig()
    assert config.scheduler_backend == "inmemory"
    assert config.unhandled_policy == "tracked"
    assert config.trap_executor_errors is False
    assert config.unhandled_check_delay_s == 0.0
    assert config.log_unhandled is True


def test_config_reads_env(monkeypatch):
    monkeypatch.setenv("DEFERRED_SCHEDULER_BACKEND", "asyncio")
    monkeypatch.setenv("DEFERRED_UNHANDLED_POLICY", " NAIVE ")
    monkeypatch.setenv("DEFERRED_TRAP_EXECUTOR_ERRORS", "yes")
    monkeypatch.setenv("DEFERRED_UNHANDLED_CHECK_DELAY_S", "0.25")
    monkeypatch.setenv("DEFERRED_LOG_UNHANDLED", "off")

    config = load_config_from_env()

    assert config.scheduler_backend == "asyncio"
    assert config.unhandled_policy == "naive"
    assert config.trap_executor_errors is True
    assert config.unhandled_check_delay_s == 0.25
    assert config.log_unhandled is False


def test_blank_env_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("DEFERRED_SCHEDULER_BACKEND", "   ")
    monkeypatch.setenv("DEFERRED_TRAP_EXECUTOR_ERRORS", "")

    config = load_config_from_env()

    assert config.scheduler_backend == "inmemory"
    assert config.trap_executor_errors is False


def test_invalid_policy_is_rejected(monkeypatch):
    monkeypatch.setenv("DEFERRED_UNHANDLED_POLICY", "sometimes")
    with pytest.raises(pydantic.ValidationError):
        load_config_from_env()


def test_invalid_boolean_is_rejected(monkeypatch):
    monkeypatch.setenv("DEFERRED_TRAP_EXECUTOR_ERRORS", "maybe")
    with pytest.raises(ValueError, match="DEFERRED_TRAP_EXECUTOR_ERRORS"):
        load_config_from_env()


def test_config_model_is_strict_and_frozen():
    with pytest.raises(pydantic.ValidationError):
        RuntimeConfig(unhandled_check_delay_s=-1)
    with pytest.raises(pydantic.ValidationError):
        RuntimeConfig(unknown_option=True)

    config = RuntimeConfig()
    with pytest.raises(pydantic.ValidationError):
        config.unhandled_policy = "naive"


def test_runtime_from_env_picks_scheduler(monkeypatch):
    assert isinstance(create_runtime_from_env().scheduler, InMemoryScheduler)

    monkeypatch.setenv("DEFERRED_SCHEDULER_BACKEND", "asyncio")
    assert isinstance(create_runtime_from_env().scheduler, AsyncioScheduler)


def test_runtime_notifier_follows_config():
    runtime = DeferredRuntime(config=RuntimeConfig(log_unhandled=False))

    assert isinstance(runtime.notifier, RejectionNotifier)
    assert runtime.notifier._log_unhandled is False  # noqa: SLF001


def test_default_runtime_is_shared_until_reset():
    first = get_default_runtime()

    assert get_default_runtime() is first
    assert Deferred.resolve(1).runtime is first

    reset_default_runtime()
    assert get_default_runtime() is not first


def test_set_default_runtime_is_used_by_new_values():
    runtime = DeferredRuntime()
    set_default_runtime(runtime)

    derived = Deferred.resolve(2).then(lambda value: value * 3)
    runtime.scheduler.run_until_idle()

    assert derived.runtime is runtime
    assert derived.payload == 6
