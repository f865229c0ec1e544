from __future__ import annotations

import asyncio
import gc
import threading

import pytest

import timedldap
from timedldap.telemetry.metrics import MetricsRegistry, Phase, Timer, current_scope_key
from timedldap.template import TimedDirectoryTemplate


class _SlowClient:
    def __init__(self) -> None:
        self.released = 0

    def acquire_context(self):  # noqa: ANN201
        return object()

    def release_context(self, context) -> None:  # noqa: ANN001
        self.released += 1

    def search(self, *args) -> None:  # noqa: ANN002
        pass


def test_timer_measures_non_negative_ms():
    with Timer("x") as t:
        pass
    assert t.elapsed >= 0.0
    assert t.elapsed_ms >= 0
    assert Timer("unused").elapsed_ms == 0


def test_record_and_snapshot_copy():
    reg = MetricsRegistry()
    reg.record(Phase.ACQUIRE, 3)
    reg.record("custom", 9)
    snap = reg.snapshot()
    assert snap == {"acquire": 3, "custom": 9}
    snap.clear()
    assert reg.snapshot() == {"acquire": 3, "custom": 9}


def test_negative_duration_rejected():
    with pytest.raises(ValueError):
        MetricsRegistry().record(Phase.RELEASE, -1)


def test_reset_on_empty_and_populated_scope():
    reg = MetricsRegistry()
    reg.reset()
    assert reg.snapshot() == {}
    reg.record(Phase.SEARCH, 1)
    reg.reset()
    reg.reset()
    assert reg.snapshot() == {}


def test_discard_drops_scope():
    reg = MetricsRegistry()
    reg.record(Phase.SEARCH, 1)
    assert reg.scopes() == 1
    reg.discard()
    assert reg.scopes() == 0
    assert reg.snapshot() == {}


def test_threads_do_not_share_snapshots():
    reg = MetricsRegistry()
    barrier = threading.Barrier(2)
    seen: dict[str, dict[str, int]] = {}

    def worker(name: str, phase: str) -> None:
        tpl = TimedDirectoryTemplate(_SlowClient(), registry=reg, operate_phase=phase)
        barrier.wait()
        tpl.execute_with_result(lambda ctx: name)
        barrier.wait()
        seen[name] = tpl.get_metrics()

    t1 = threading.Thread(target=worker, args=("a", "search"))
    t2 = threading.Thread(target=worker, args=("b", "operate"))
    t1.start()
    t2.start()
    t1.join()
    t2.join()
    assert set(seen["a"]) == {"acquire", "search", "release"}
    assert set(seen["b"]) == {"acquire", "operate", "release"}
    # main thread never ran a call
    assert reg.snapshot() == {}


def test_asyncio_tasks_are_isolated():
    reg = MetricsRegistry()

    async def one(phase: str) -> dict[str, int]:
        tpl = TimedDirectoryTemplate(_SlowClient(), registry=reg, operate_phase=phase)
        tpl.execute_with_result(lambda ctx: None)
        await asyncio.sleep(0)
        return tpl.get_metrics()

    async def main() -> list[dict[str, int]]:
        return await asyncio.gather(one("search"), one("operate"))

    a, b = asyncio.run(main())
    assert "operate" not in a
    assert "search" not in b


def test_explicit_scope_key_wins():
    reg = MetricsRegistry()
    with reg.scope("request-1"):
        assert current_scope_key() == ("explicit", "request-1")
        reg.record(Phase.ACQUIRE, 4)
    assert reg.snapshot() == {}
    with reg.scope("request-1"):
        assert reg.snapshot() == {"acquire": 4}
    with reg.scope("request-2"):
        assert reg.snapshot() == {}


def test_explicit_scope_rejects_none():
    with pytest.raises(ValueError):
        with MetricsRegistry().scope(None):
            pass


def test_module_level_accessors_use_default_registry():
    timedldap.reset_metrics()
    tpl = TimedDirectoryTemplate(_SlowClient(), operate_phase="search")
    tpl.execute_with_result(lambda ctx: None)
    assert set(timedldap.get_metrics()) == {"acquire", "search", "release"}
    timedldap.reset_metrics()
    assert timedldap.get_metrics() == {}


def test_sequential_tasks_start_with_empty_snapshots():
    reg = MetricsRegistry()

    async def one(i: int) -> dict[str, int]:
        before = reg.snapshot()
        reg.record(Phase.ACQUIRE, i)
        return before

    async def main() -> list[dict[str, int]]:
        seen = []
        for i in range(50):
            seen.append(await asyncio.create_task(one(i)))
        return seen

    assert asyncio.run(main()) == [{}] * 50


def test_finished_tasks_release_their_scopes():
    reg = MetricsRegistry()

    async def one(i: int) -> None:
        reg.record(Phase.SEARCH, i % 7)
        await asyncio.sleep(0)

    async def main() -> int:
        await asyncio.gather(*(one(i) for i in range(200)))
        await asyncio.sleep(0)
        return reg.scopes()

    assert asyncio.run(main()) == 0
    gc.collect()
    assert reg.scopes() == 0


def test_sequential_threads_start_with_empty_snapshots():
    reg = MetricsRegistry()
    seen: list[dict[str, int]] = []

    def worker(i: int) -> None:
        seen.append(reg.snapshot())
        reg.record(Phase.RELEASE, i)

    for i in range(20):
        t = threading.Thread(target=worker, args=(i,))
        t.start()
        t.join()
    assert seen == [{}] * 20
    assert reg.snapshot() == {}


def test_explicit_scope_survives_until_discarded():
    reg = MetricsRegistry()
    with reg.scope("job-9"):
        reg.record(Phase.ACQUIRE, 2)
    gc.collect()
    assert reg.scopes() == 1
    with reg.scope("job-9"):
        reg.discard()
    assert reg.scopes() == 0
