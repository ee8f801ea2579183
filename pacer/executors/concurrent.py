"""Concurrent dispatch: every job of a window's batch runs at once."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable

from pacer.executors.base import WindowedExecutor
from pacer.executors.job import Immediate, Job, run_job


class ConcurrentExecutor(WindowedExecutor):
    """Starts each reserved job immediately, in queue order.

    Jobs in a batch do not wait on each other. Each frees its own slot when
    it settles, so fast jobs return capacity before slow siblings and the
    next tick sees however many are actually still running.

    Work producers are invoked synchronously inside the tick; only the wait
    for a pending result runs as a separate task.
    """

    policy = "concurrent"

    def _dispatch(self, batch: list[Job]) -> None:
        for index, job in enumerate(batch):
            try:
                completion = run_job(job)
            except Exception as exc:
                self._release()
                self._report_failure(exc, job)
                continue
            except BaseException:
                self._release()
                self._unreserve(batch[index + 1:])
                raise

            if isinstance(completion, Immediate):
                self._release()
                continue

            task = asyncio.create_task(self._settle(completion.awaitable))
            self._track(task, job)

    async def _settle(self, awaitable: Awaitable[Any]) -> None:
        try:
            await awaitable
        finally:
            self._release()
