"""Rate limiter interfaces.

Callers depend on these abstractions (not the concrete implementation) so the
record store can be swapped (e.g., Redis) without touching the HTTP layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class RateLimitPolicy:
    """Budget for one action class (login attempts, link creation, ...).

    Attributes:
        max_requests: Requests admitted per window for a single key.
        window_ms: Window length in milliseconds.

    Raises:
        ValueError: If either value is not a positive integer.
    """

    max_requests: int
    window_ms: int

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")

    @property
    def window_seconds(self) -> float:
        return self.window_ms / 1000


@dataclass
class RateLimitRecord:
    """Counter for one key inside its current window."""

    count: int
    window_reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class RateLimitStore(ABC):
    """Key -> record storage owned by a single limiter."""

    @abstractmethod
    def get(self, key: str) -> RateLimitRecord | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, record: RateLimitRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def keys(self) -> Iterable[str]:
        raise NotImplementedError


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, key: str, policy: RateLimitPolicy) -> RateLimitResult:
        """Consume one unit of budget for a given key.

        Args:
            key: Opaque action+actor identifier (e.g., ``login:<email>``).
            policy: Budget applied to this key.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    def admit(self, key: str, policy: RateLimitPolicy) -> bool:
        """Return True when the action may proceed, False when throttled."""
        return self.consume(key, policy).allowed
