"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory store and later migrate to Redis or another shared store without
changing the API layer.
"""

from tzguard.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitPolicy,
    RateLimitRecord,
    RateLimitResult,
    RateLimitStore,
)
from tzguard.adapters.rate_limit.in_memory import (
    FixedWindowRateLimiter,
    InMemoryRateLimitStore,
)

__all__ = [
    "AbstractRateLimiter",
    "FixedWindowRateLimiter",
    "InMemoryRateLimitStore",
    "RateLimitPolicy",
    "RateLimitRecord",
    "RateLimitResult",
    "RateLimitStore",
]
