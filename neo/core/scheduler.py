"""Deferred completions on a single cooperative queue.

Work is scheduled with a fixed delay and completed strictly in the order of
(due time, scheduling order).  Production code drains the queue on the real
clock; tests drive it with :class:`VirtualClock`.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol


class Clock(Protocol):
    def now(self) -> float: ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic()


class VirtualClock:
    """Manually advanced clock used in tests."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("cannot move the clock backwards")
        self._now += seconds


@dataclass
class DeferredOperation:
    operation_id: str
    label: str
    due_at: float
    status: str = "pending"
    result: Any = None
    _callback: Callable[[], Any] | None = field(default=None, repr=False)

    @property
    def done(self) -> bool:
        return self.status == "completed"


MAX_COMPLETED = 256


class DeferredQueue:
    """Pending operations stay addressable until they complete; only the most
    recent ``max_completed`` completed operations are kept for polling.
    """

    def __init__(self, clock: Clock | None = None, *, max_completed: int = MAX_COMPLETED) -> None:
        self._clock = clock or MonotonicClock()
        self._max_completed = max(1, max_completed)
        self._completed: deque[str] = deque()
        self._heap: list[tuple[float, int, DeferredOperation]] = []
        self._operations: dict[str, DeferredOperation] = {}
        self._sequence = itertools.count(1)

    @property
    def clock(self) -> Clock:
        return self._clock

    def schedule(self, delay: float, callback: Callable[[], Any], *, label: str) -> DeferredOperation:
        sequence = next(self._sequence)
        operation = DeferredOperation(
            operation_id=f"op-{sequence:05d}",
            label=label,
            due_at=self._clock.now() + max(0.0, delay),
            _callback=callback,
        )
        heapq.heappush(self._heap, (operation.due_at, sequence, operation))
        self._operations[operation.operation_id] = operation
        return operation

    def get(self, operation_id: str) -> DeferredOperation | None:
        return self._operations.get(operation_id)

    def pending(self) -> list[DeferredOperation]:
        return [entry[2] for entry in sorted(self._heap)]

    def run_due(self) -> list[DeferredOperation]:
        """Complete every operation whose due time has been reached."""

        completed: list[DeferredOperation] = []
        while self._heap and self._heap[0][0] <= self._clock.now():
            _, _, operation = heapq.heappop(self._heap)
            callback, operation._callback = operation._callback, None
            # Callbacks may schedule more work; it joins the heap behind this entry.
            operation.result = callback() if callback is not None else None
            operation.status = "completed"
            completed.append(operation)
            self._retire(operation)
        return completed

    def _retire(self, operation: DeferredOperation) -> None:
        self._completed.append(operation.operation_id)
        while len(self._completed) > self._max_completed:
            self._operations.pop(self._completed.popleft(), None)

    def advance(self, seconds: float) -> list[DeferredOperation]:
        if not isinstance(self._clock, VirtualClock):
            raise TypeError("advance() requires a VirtualClock")
        self._clock.advance(seconds)
        return self.run_due()

    async def drain(self) -> None:
        """Sleep on the event loop until every scheduled operation completed."""

        while self._heap:
            wait = self._heap[0][0] - self._clock.now()
            if wait > 0:
                if isinstance(self._clock, VirtualClock):
                    self._clock.advance(wait)
                else:
                    await asyncio.sleep(wait)
            self.run_due()

    def reset(self) -> None:
        self._heap.clear()
        self._operations.clear()
        self._completed.clear()
