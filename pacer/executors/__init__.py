"""Rate-limited job executors.

Two dispatch policies share one windowed scheduler: ``ConcurrentExecutor``
starts a window's batch all at once, ``SerialExecutor`` runs it one job at a
time.
"""

from pacer.executors.base import WindowedExecutor
from pacer.executors.concurrent import ConcurrentExecutor
from pacer.executors.factory import create_executor
from pacer.executors.job import Immediate, Job, Pending, WorkResult, run_job
from pacer.executors.serial import SerialExecutor
from pacer.schemas.options import WindowOptions

__all__ = [
    "ConcurrentExecutor",
    "Immediate",
    "Job",
    "Pending",
    "SerialExecutor",
    "WindowOptions",
    "WindowedExecutor",
    "WorkResult",
    "create_executor",
    "run_job",
]
