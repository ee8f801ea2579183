"""Library-level exception types.

Only configuration problems are reported through these types. Failures raised
by submitted jobs are never wrapped; they reach the event loop's exception
handler untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and callers."""

    code: str
    message: str
    hint: str
    field: str
    actual_value: Any
    context: NotRequired[dict[str, Any]]


@dataclass
class PacerError(Exception):
    """Base error for dispatcher failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ConfigurationError(PacerError):
    """Raised when executor options or settings are invalid."""
