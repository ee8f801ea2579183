"""Pytest configuration and fixtures shared across all test modules.

The environment is pinned before any ``pacer`` import so settings never pick
up a developer's local .env file.
"""

from __future__ import annotations

import heapq
import itertools
import os
from typing import Callable

import pytest

# CRITICAL: Set this before any imports that might load settings
os.environ["PACER_ENV"] = "testing"


class _FakeHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock:
    """Deterministic millisecond clock that fires timers as it advances.

    ``timer_factory`` matches the executors' timer factory signature, so an
    executor built with it only ticks when the test calls ``advance``.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self._seq = itertools.count()
        self._events: list[tuple[int, int, _FakeHandle, Callable[[], None]]] = []
        self.timers: list[_FakeHandle] = []

    def call_later(self, delay_ms: int, fn: Callable[[], None]) -> _FakeHandle:
        handle = _FakeHandle()
        heapq.heappush(self._events, (self.now_ms + delay_ms, next(self._seq), handle, fn))
        return handle

    def timer_factory(self, interval_seconds: float, callback: Callable[[], None]) -> _FakeHandle:
        interval_ms = round(interval_seconds * 1000)
        handle = _FakeHandle()
        self.timers.append(handle)

        def _fire() -> None:
            heapq.heappush(
                self._events,
                (self.now_ms + interval_ms, next(self._seq), handle, _fire),
            )
            callback()

        heapq.heappush(self._events, (self.now_ms + interval_ms, next(self._seq), handle, _fire))
        return handle

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while self._events and self._events[0][0] <= target:
            due, _, handle, fn = heapq.heappop(self._events)
            if handle.cancelled:
                continue
            self.now_ms = due
            fn()
        self.now_ms = target


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
