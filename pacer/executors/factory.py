"""Factory for creating executors from settings."""

from __future__ import annotations

from typing import Any, Mapping

from pacer.core.config import settings
from pacer.core.errors import ConfigurationError
from pacer.core.timer import TimerFactory
from pacer.executors.base import WindowedExecutor
from pacer.executors.concurrent import ConcurrentExecutor
from pacer.executors.serial import SerialExecutor
from pacer.schemas.options import WindowOptions

_POLICIES: dict[str, type[WindowedExecutor]] = {
    ConcurrentExecutor.policy: ConcurrentExecutor,
    SerialExecutor.policy: SerialExecutor,
}


def create_executor(
    policy: str | None = None,
    options: WindowOptions | Mapping[str, Any] | None = None,
    *,
    timer_factory: TimerFactory | None = None,
) -> WindowedExecutor:
    """Instantiate an executor for the requested dispatch policy.

    Anything not passed explicitly is read from ``settings.scheduler``
    (``PACER_SCHEDULER_*`` environment variables).

    Args:
        policy: ``"concurrent"`` or ``"serial"``.
        options: Window options; replaces the configured ones entirely.
        timer_factory: Optional timer factory passed to the executor.

    Returns:
        WindowedExecutor: Idle executor for the policy.

    Raises:
        ConfigurationError: If the policy is unknown or options are invalid.
    """
    name = (policy or settings.scheduler.policy).lower()
    executor_cls = _POLICIES.get(name)
    if executor_cls is None:
        raise ConfigurationError(
            code="unknown_policy",
            message=(
                f"Unknown dispatch policy: '{name}'. "
                f"Supported policies: {', '.join(sorted(_POLICIES))}"
            ),
            details={"field": "policy", "actual_value": name},
        )

    if options is None:
        options = {
            "max_operations_per_interval": settings.scheduler.max_operations_per_interval,
            "rate_limit_interval_ms": settings.scheduler.rate_limit_interval_ms,
            "buffer_ms": settings.scheduler.buffer_ms,
        }

    return executor_cls(options, timer_factory=timer_factory)
