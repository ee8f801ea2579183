"""Jobs and the runner shared by every dispatch policy.

A job's work producer returns either a plain value or an awaitable. That
result is tagged once, at the boundary, as ``Immediate`` or ``Pending``;
everything downstream inspects the tag only. Producers that already know
which one they return may hand back the tagged value themselves.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union


@dataclass(frozen=True)
class Immediate:
    """Work that finished synchronously with ``value``."""

    value: Any = None


@dataclass(frozen=True)
class Pending:
    """Work whose value arrives when ``awaitable`` resolves."""

    awaitable: Awaitable[Any]


WorkResult = Union[Immediate, Pending]

# A callback may be a plain function or return an awaitable (e.g. async def).
Callback = Callable[[Any], Any]


def as_work_result(result: Any) -> WorkResult:
    """Tag a raw return value as ``Immediate`` or ``Pending``."""

    if isinstance(result, (Immediate, Pending)):
        return result
    if inspect.isawaitable(result):
        return Pending(result)
    return Immediate(result)


@dataclass(frozen=True)
class Job:
    """A unit of work and an optional completion callback.

    Attributes:
        work: Zero-argument callable producing a value, an awaitable, or an
            already tagged ``WorkResult``.
        callback: Called with the resolved value once the work completes.
            When absent the value is discarded.
    """

    work: Callable[[], Any]
    callback: Callback | None = None

    def __post_init__(self) -> None:
        if not callable(self.work):
            raise TypeError("work must be callable")
        if self.callback is not None and not callable(self.callback):
            raise TypeError("callback must be callable or None")

    def invoke(self) -> WorkResult:
        return as_work_result(self.work())


def _notify(callback: Callback | None, value: Any) -> WorkResult:
    if callback is None:
        return Immediate()
    return as_work_result(callback(value))


async def _resolve_then_notify(awaitable: Awaitable[Any], callback: Callback | None) -> None:
    value = await awaitable
    notified = _notify(callback, value)
    if isinstance(notified, Pending):
        await notified.awaitable


def run_job(job: Job) -> WorkResult:
    """Invoke a job's work exactly once and deliver its value to the callback.

    If the work completes synchronously the callback runs right away and the
    result is ``Immediate``, unless the callback itself returns an awaitable.
    Otherwise the result is ``Pending`` on a coroutine that awaits the work,
    runs the callback and awaits whatever the callback returned.

    Nothing is caught here: an exception from the work, its awaitable or the
    callback propagates to whoever runs or awaits the completion.

    Args:
        job: Job to run.

    Returns:
        The completion of the job, tagged.
    """

    result = job.invoke()
    if isinstance(result, Pending):
        return Pending(_resolve_then_notify(result.awaitable, job.callback))
    return _notify(job.callback, result.value)
