"""Windowed queue scheduler shared by the dispatch policies.

The scheduler owns the FIFO waiting queue, the repeating timer and the count
of jobs reserved against the current window. Subclasses decide only how a
reserved batch is executed (``_dispatch``) and must call ``_release`` exactly
once per reserved job when it settles.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Mapping

from pacer.core.logging import reset_window_id, set_window_id
from pacer.core.timer import TimerFactory, TimerHandle, start_interval_timer
from pacer.executors.job import Job
from pacer.schemas.options import WindowOptions

logger = logging.getLogger(__name__)


class WindowedExecutor(ABC):
    """Run queued jobs without exceeding a fixed number per window.

    The first ``submit`` on an executor that is not running dispatches a
    batch immediately and then starts the repeating timer; every tick after
    that reserves up to ``capacity_per_window - active_count`` jobs from the
    front of the queue. Jobs still in flight when a tick fires keep their
    slot, so they reduce what the new window can start.

    All methods must be called from the thread running the event loop.

    Important:
        A capacity of 0, or slots held by jobs that never settle, leaves work
        queued forever without any error.
    """

    policy: str

    def __init__(
        self,
        options: WindowOptions | Mapping[str, Any] | None = None,
        *,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        """Initialize an idle executor.

        Args:
            options: Window options as a model or mapping; defaults when omitted.
            timer_factory: Creates the repeating timer; defaults to one on the
                running asyncio loop.

        Raises:
            ConfigurationError: If the options are invalid.
        """

        self._options = WindowOptions.parse(options)
        self._timer_factory = timer_factory or start_interval_timer
        self._timer: TimerHandle | None = None
        self._waiting: deque[Job] = deque()
        self._active_count = 0
        self._window_seq = 0
        self._in_flight: set[asyncio.Future[Any]] = set()

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"{type(self).__name__}(capacity_per_window={self._options.capacity_per_window}, "
            f"window_length_ms={self._options.window_length_ms}, "
            f"grace_buffer_ms={self._options.grace_buffer_ms}, "
            f"queued={len(self._waiting)}, active={self._active_count}, "
            f"started={self.has_started()})"
        )

    @property
    def options(self) -> WindowOptions:
        return self._options

    @property
    def active_count(self) -> int:
        """Jobs reserved against the window and not yet settled."""
        return self._active_count

    @property
    def queued_count(self) -> int:
        return len(self._waiting)

    def submit(self, *jobs: Job) -> None:
        """Queue jobs in order, dispatching immediately if not yet started.

        When the executor is already running the jobs wait for the next tick.
        Dispatching from here as well could let a submission made during a
        tick push the window past its capacity.

        Args:
            jobs: Jobs to append to the back of the queue, in order.

        Raises:
            TypeError: If any argument is not a ``Job``; nothing is queued.
            RuntimeError: If called outside a running event loop.
        """

        if not jobs:
            return
        # Fail before touching the queue when there is no loop to run jobs on.
        asyncio.get_running_loop()
        for job in jobs:
            if not isinstance(job, Job):
                raise TypeError(f"expected Job, got {type(job).__name__}")

        self._waiting.extend(jobs)

        if not self.has_started():
            try:
                self._on_wake_up()
            finally:
                self.start()

    def start(self) -> None:
        """Start the repeating window timer if it is not running."""

        if self.has_started():
            return

        self._timer = self._timer_factory(self._options.interval_seconds, self._on_wake_up)
        logger.info(
            "scheduler.started",
            extra={
                "policy": self.policy,
                "interval_s": self._options.interval_seconds,
                "capacity": self._options.capacity_per_window,
            },
        )

    def stop(self) -> None:
        """Stop scheduling new batches; jobs already dispatched keep running."""

        timer, self._timer = self._timer, None
        if timer is None:
            return

        timer.cancel()
        logger.info(
            "scheduler.stopped",
            extra={
                "policy": self.policy,
                "queued": len(self._waiting),
                "active": self._active_count,
            },
        )

    def has_started(self) -> bool:
        return self._timer is not None

    async def drain(self) -> None:
        """Wait until every job dispatched so far has settled.

        Jobs still waiting in the queue are not dispatched by this call.
        """

        while self._in_flight:
            await asyncio.wait(set(self._in_flight))

    def _on_wake_up(self) -> None:
        """Reserve capacity for the next batch and hand it to the policy."""

        self._window_seq += 1
        token = set_window_id(self._window_seq)
        try:
            available = self._options.capacity_per_window - self._active_count
            batch_size = min(len(self._waiting), available)

            logger.debug(
                "scheduler.tick",
                extra={
                    "policy": self.policy,
                    "available": available,
                    "batch_size": max(batch_size, 0),
                    "queued": len(self._waiting),
                },
            )

            if batch_size <= 0:
                return

            batch = [self._waiting.popleft() for _ in range(batch_size)]
            # Reserve the whole batch before any job runs.
            self._active_count += batch_size
            self._dispatch(batch)
        finally:
            reset_window_id(token)

    @abstractmethod
    def _dispatch(self, batch: list[Job]) -> None:
        """Execute a reserved batch, calling ``_release`` once per job."""
        raise NotImplementedError

    def _unreserve(self, jobs: list[Job]) -> None:
        """Return reserved jobs that never started to the front of the queue."""

        self._waiting.extendleft(reversed(jobs))
        self._active_count -= len(jobs)

    def _release(self) -> None:
        self._active_count -= 1
        logger.debug(
            "job.released",
            extra={"policy": self.policy, "active": self._active_count},
        )

    def _track(self, task: asyncio.Future[Any], job: Job) -> None:
        """Keep a reference to a job's task and report its failure, if any."""

        self._in_flight.add(task)

        def _done(finished: asyncio.Future[Any]) -> None:
            self._in_flight.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                self._report_failure(exc, job)

        task.add_done_callback(_done)

    def _report_failure(self, exc: BaseException, job: Job) -> None:
        """Hand a job failure to the event loop's exception handler."""

        asyncio.get_running_loop().call_exception_handler(
            {
                "message": f"{type(self).__name__} job failed",
                "exception": exc,
                "job": job,
            }
        )
