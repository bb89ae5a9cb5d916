from __future__ import annotations

from deferred import Deferred, DeferredRuntime, InMemoryScheduler, RejectionRecorder, gather_all


def _runtime() -> DeferredRuntime:
    return DeferredRuntime(scheduler=InMemoryScheduler())


def _after(runtime: DeferredRuntime, delay_s: float, *, value=None, reason=None) -> Deferred:
    def executor(fulfill, reject):
        if reason is not None:
            runtime.scheduler.call_later(delay_s, lambda: reject(reason))
        else:
            runtime.scheduler.call_later(delay_s, lambda: fulfill(value))

    return Deferred(executor, runtime=runtime)


def test_empty_input_fulfills_immediately_with_empty_list():
    runtime = _runtime()
    out = Deferred.all([], runtime=runtime)

    assert out.is_fulfilled
    assert out.payload == []


def test_values_keep_input_order():
    runtime = _runtime()
    out = Deferred.all(
        [
            Deferred.resolve(123, runtime=runtime),
            Deferred.resolve(456, runtime=runtime),
            Deferred.resolve(789, runtime=runtime),
            _after(runtime, 0).then(lambda _: 1000),
        ],
        runtime=runtime,
    )
    runtime.scheduler.run_until_idle()

    assert out.payload == [123, 456, 789, 1000]


def test_order_follows_input_not_settlement_time():
    runtime = _runtime()
    out = gather_all(
        [
            _after(runtime, 3, value=1),
            _after(runtime, 1, value=2),
            _after(runtime, 2, value=3),
        ],
        runtime=runtime,
    )
    runtime.scheduler.run_until_idle()

    assert out.is_fulfilled
    assert out.payload == [1, 2, 3]


def test_plain_values_are_wrapped():
    runtime = _runtime()
    out = Deferred.all([1, Deferred.resolve(2, runtime=runtime), "three"], runtime=runtime)
    runtime.scheduler.run_until_idle()

    assert out.payload == [1, 2, "three"]


def test_rejects_with_first_rejection_by_position():
    runtime = _runtime()
    out = Deferred.all(
        [
            Deferred.resolve(1, runtime=runtime),
            Deferred.reject(2, runtime=runtime),
            Deferred.resolve(3, runtime=runtime),
        ],
        runtime=runtime,
    )
    out.catch(lambda reason: None)
    runtime.scheduler.run_until_idle()

    assert out.is_rejected
    assert out.payload == 2


def test_positional_rejection_wins_over_earlier_rejection_in_time():
    runtime = _runtime()
    out = Deferred.all(
        [
            Deferred.resolve(123, runtime=runtime),
            _after(runtime, 5, reason="slow"),
            _after(runtime, 1, reason="fast"),
        ],
        runtime=runtime,
    )
    out.catch(lambda reason: None)

    runtime.scheduler.advance(2)
    assert out.is_pending

    runtime.scheduler.run_until_idle()
    assert out.payload == "slow"


def test_waits_for_every_item_before_settling():
    runtime = _runtime()
    gate: dict = {}
    slow = Deferred(lambda fulfill, reject: gate.update(fulfill=fulfill), runtime=runtime)
    out = Deferred.all([Deferred.reject("x", runtime=runtime), slow], runtime=runtime)
    out.catch(lambda reason: None)
    runtime.scheduler.run_until_idle()
    assert out.is_pending

    gate["fulfill"]("done")
    runtime.scheduler.run_until_idle()
    assert out.is_rejected and out.payload == "x"


def test_same_item_may_appear_twice():
    runtime = _runtime()
    item = _after(runtime, 0, value="x")
    out = Deferred.all([item, item], runtime=runtime)
    runtime.scheduler.run_until_idle()

    assert out.payload == ["x", "x"]


def test_accepts_any_iterable():
    runtime = _runtime()
    out = Deferred.all((Deferred.resolve(n, runtime=runtime) for n in range(3)), runtime=runtime)
    runtime.scheduler.run_until_idle()

    assert out.payload == [0, 1, 2]


def test_aggregate_inherits_runtime_of_its_items():
    runtime = _runtime()
    seen: list = []
    aggregate = Deferred.all(
        [Deferred.resolve(1, runtime=runtime), 2, Deferred.resolve(3, runtime=runtime)]
    )
    aggregate.then(seen.append)
    runtime.scheduler.run_until_idle()

    assert aggregate.runtime is runtime
    assert seen == [[1, 2, 3]]


def test_rejected_member_is_handled_by_aggregate():
    runtime = _runtime()
    recorder = RejectionRecorder()
    runtime.notifier.subscribe(recorder)
    member = Deferred.reject("member", runtime=runtime)
    aggregate = Deferred.all([Deferred.resolve(1, runtime=runtime), member], runtime=runtime)
    runtime.scheduler.run_until_idle()

    assert aggregate.is_rejected
    assert [event.deferred for event in recorder.events] == [aggregate]
    assert recorder.reasons == ["member"]
