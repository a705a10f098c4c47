"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: one lock guards every read-compare-mutate on the store.
- Windows start at the first request for a key, not at clock boundaries.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable, Iterable

from tzguard.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitPolicy,
    RateLimitRecord,
    RateLimitResult,
    RateLimitStore,
)


class InMemoryRateLimitStore(RateLimitStore):
    """Dict-backed record store. Not synchronized on its own."""

    def __init__(self) -> None:
        self._records: dict[str, RateLimitRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def get(self, key: str) -> RateLimitRecord | None:
        return self._records.get(key)

    def set(self, key: str, record: RateLimitRecord) -> None:
        self._records[key] = record

    def delete(self, key: str) -> None:
        self._records.pop(key, None)

    def keys(self) -> Iterable[str]:
        return list(self._records)


class FixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests per key inside a fixed window.

    The first request for a key opens a window of ``policy.window_ms``; up to
    ``policy.max_requests`` requests are admitted until the window has passed.
    A request arriving exactly at the reset instant still counts against the
    old window.

    Bursts straddling a window boundary can reach twice the nominal rate. That
    is the price of O(1) state per key and no background sweeping.
    """

    def __init__(
        self,
        *,
        store: RateLimitStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Record store; a fresh in-memory store when omitted.
            clock: Time source function returning UNIX time in seconds.
        """
        self._store = store if store is not None else InMemoryRateLimitStore()
        self._clock = clock
        self._lock = threading.RLock()

    def _build_allowed_result(
        self, *, policy: RateLimitPolicy, record: RateLimitRecord
    ) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=policy.max_requests,
            remaining=max(0, policy.max_requests - record.count),
            reset_at=int(math.ceil(record.window_reset_at)),
            retry_after_seconds=None,
        )

    def _build_blocked_result(
        self, *, now: float, policy: RateLimitPolicy, record: RateLimitRecord
    ) -> RateLimitResult:
        retry_after = max(0, int(math.ceil(record.window_reset_at - now)))
        return RateLimitResult(
            allowed=False,
            limit=policy.max_requests,
            remaining=0,
            reset_at=int(math.ceil(record.window_reset_at)),
            retry_after_seconds=retry_after,
        )

    def consume(self, key: str, policy: RateLimitPolicy) -> RateLimitResult:
        """Check the key's window and count the request if it is admitted.

        Args:
            key: Opaque rate limit key.
            policy: Budget for this action class.

        Returns:
            RateLimitResult with allowance decision and metadata.
        """
        with self._lock:
            now = self._clock()
            record = self._store.get(key)

            if record is None or now > record.window_reset_at:
                record = RateLimitRecord(
                    count=1,
                    window_reset_at=now + policy.window_seconds,
                )
                self._store.set(key, record)
                return self._build_allowed_result(policy=policy, record=record)

            if record.count < policy.max_requests:
                record.count += 1
                self._store.set(key, record)
                return self._build_allowed_result(policy=policy, record=record)

            return self._build_blocked_result(now=now, policy=policy, record=record)

    def sweep_expired(self) -> int:
        """Drop records whose window has passed.

        Not needed for correctness; keeps memory bounded when keys churn.

        Returns:
            Number of records removed.
        """
        with self._lock:
            now = self._clock()
            expired = [
                key
                for key in self._store.keys()
                if (record := self._store.get(key)) is not None
                and now > record.window_reset_at
            ]
            for key in expired:
                self._store.delete(key)
            return len(expired)
