import asyncio
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from neo.core.scheduler import DeferredQueue, MonotonicClock, VirtualClock


def test_operations_start_pending_and_complete_after_delay():
    queue = DeferredQueue(VirtualClock())
    operation = queue.schedule(1.5, lambda: "done", label="job")
    assert operation.status == "pending"
    assert queue.advance(1.0) == []
    assert not operation.done
    assert queue.advance(0.5) == [operation]
    assert operation.status == "completed"
    assert operation.result == "done"
    assert queue.get(operation.operation_id) is operation


def test_completion_order_follows_scheduling_order():
    queue = DeferredQueue(VirtualClock())
    calls: list[str] = []
    first = queue.schedule(1.5, lambda: calls.append("first"), label="a")
    second = queue.schedule(1.5, lambda: calls.append("second"), label="b")
    completed = queue.advance(2)
    assert completed == [first, second]
    assert calls == ["first", "second"]


def test_earlier_due_time_runs_first():
    queue = DeferredQueue(VirtualClock())
    calls: list[str] = []
    queue.schedule(2.0, lambda: calls.append("slow"), label="slow")
    queue.schedule(0.5, lambda: calls.append("fast"), label="fast")
    queue.advance(5)
    assert calls == ["fast", "slow"]


def test_pending_lists_scheduled_work():
    queue = DeferredQueue(VirtualClock())
    operation = queue.schedule(1, lambda: None, label="x")
    assert queue.pending() == [operation]
    queue.advance(1)
    assert queue.pending() == []


def test_drain_with_virtual_clock_does_not_sleep():
    clock = VirtualClock()
    queue = DeferredQueue(clock)
    operation = queue.schedule(10, lambda: 42, label="long")
    asyncio.run(queue.drain())
    assert operation.result == 42
    assert clock.now() == 10


def test_advance_requires_virtual_clock():
    queue = DeferredQueue(MonotonicClock())
    with pytest.raises(TypeError):
        queue.advance(1)


def test_virtual_clock_cannot_go_backwards():
    with pytest.raises(ValueError):
        VirtualClock().advance(-1)


def test_only_recent_completed_operations_are_retained():
    queue = DeferredQueue(VirtualClock(), max_completed=2)
    first, second, third = (queue.schedule(1, lambda: None, label=name) for name in "abc")
    pending = queue.schedule(10, lambda: None, label="later")
    queue.advance(1)

    assert queue.get(first.operation_id) is None
    assert queue.get(second.operation_id) is second
    assert queue.get(third.operation_id) is third
    assert queue.get(pending.operation_id) is pending
