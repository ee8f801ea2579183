"""Repeating timers for window ticks.

Executors take a ``timer_factory`` so tests can drive window boundaries with
a fake clock. The default factory schedules on the running asyncio loop.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """Handle returned by a timer factory; the only operation is cancel."""

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


class IntervalTimer:
    """Repeating timer on an asyncio event loop.

    Each firing arms the next one a full interval after the moment it
    actually ran, so two ticks are never closer than ``interval_seconds``.
    After the loop has been blocked, missed firings are dropped instead of
    replayed back to back. The next firing is armed before the callback
    runs; an exception raised by the callback goes to the loop's exception
    handler and the timer keeps running.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_seconds: float,
        callback: Callable[[], None],
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self._loop = loop
        self._interval = interval_seconds
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_at(loop.time() + interval_seconds, self._fire)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _fire(self) -> None:
        self._handle = self._loop.call_at(self._loop.time() + self._interval, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()


def start_interval_timer(interval_seconds: float, callback: Callable[[], None]) -> IntervalTimer:
    """Start an ``IntervalTimer`` on the running loop.

    Raises:
        RuntimeError: If called outside a running event loop.
    """

    return IntervalTimer(asyncio.get_running_loop(), interval_seconds, callback)
