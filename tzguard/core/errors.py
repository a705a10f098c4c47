"""Application-level exception types.

Domain checks (validation, rate limits) report through return values; these
errors exist for the HTTP layer and for misconfiguration, so every failure
that does surface gets the same JSON shape and log fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    action: str
    limit: int
    remaining: int
    reset_at: int
    retry_after: int
    fields: dict[str, str]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

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


class ValidationAppError(AppError):
    """Raised when a request cannot be interpreted at all."""


class RateLimitAppError(AppError):
    """Raised by the HTTP layer when an action's budget is exhausted."""


class ConfigurationAppError(AppError):
    """Raised when the policy table lacks something a route needs."""
