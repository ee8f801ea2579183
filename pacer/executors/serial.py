"""Serial dispatch: at most one job's work is in flight at any instant."""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

from pacer.core.timer import TimerFactory
from pacer.executors.base import WindowedExecutor
from pacer.executors.job import Job, Pending, run_job
from pacer.schemas.options import WindowOptions


class SerialExecutor(WindowedExecutor):
    """Runs reserved jobs one after another, across window boundaries.

    Every reserved job becomes a link in one chain that lives as long as the
    executor: a link starts only once the link before it has settled, no
    matter which window reserved either of them. Capacity is still reserved
    per job at tick time, so ``active_count`` may exceed one even though a
    single job is executing; this keeps window accounting identical to
    ``ConcurrentExecutor``.

    A failed job is reported and the chain moves on to the next link.
    """

    policy = "serial"

    def __init__(
        self,
        options: WindowOptions | Mapping[str, Any] | None = None,
        *,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        super().__init__(options, timer_factory=timer_factory)
        self._tail: asyncio.Task[None] | None = None

    def _dispatch(self, batch: list[Job]) -> None:
        for job in batch:
            link = asyncio.create_task(self._link(self._tail, job))
            self._tail = link
            self._track(link, job)

    async def _link(self, previous: asyncio.Task[None] | None, job: Job) -> None:
        if previous is not None and not previous.done():
            # wait() does not re-raise the previous link's failure here
            await asyncio.wait({previous})
        try:
            completion = run_job(job)
            if isinstance(completion, Pending):
                await completion.awaitable
        finally:
            self._release()
