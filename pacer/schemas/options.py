"""Window configuration accepted by executors."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pacer.core.errors import ConfigurationError


class WindowOptions(BaseModel):
    """Capacity and timing of the scheduling window.

    Each field can be given by name or by its boundary alias
    (``max_operations_per_interval``, ``rate_limit_interval_ms``,
    ``buffer_ms``). Unrecognized keys are ignored.
    """

    capacity_per_window: int = Field(
        10,
        alias="max_operations_per_interval",
        description="Maximum number of jobs reserved per window; 0 starves all work",
        ge=0,
    )
    window_length_ms: int = Field(
        10000,
        alias="rate_limit_interval_ms",
        description="Nominal window length in milliseconds",
        gt=0,
    )
    grace_buffer_ms: int = Field(
        200,
        alias="buffer_ms",
        description="Added to the window length so a window never closes early",
        ge=0,
    )

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @property
    def interval_seconds(self) -> float:
        """Time between ticks: window length plus grace buffer, in seconds."""
        return (self.window_length_ms + self.grace_buffer_ms) / 1000

    @classmethod
    def parse(cls, options: "WindowOptions | Mapping[str, Any] | None" = None) -> "WindowOptions":
        """Build options from a model, a mapping, or nothing (all defaults).

        Raises:
            ConfigurationError: If any recognized value is out of range or of
                the wrong type.
        """

        if options is None:
            return cls()
        if isinstance(options, cls):
            return options

        try:
            return cls.model_validate(dict(options))
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ConfigurationError(
                code="invalid_window_options",
                message=f"Invalid window option '{field}': {first['msg']}",
                details={
                    "field": field,
                    "actual_value": first.get("input"),
                    "context": {"error_count": exc.error_count()},
                },
            ) from exc
