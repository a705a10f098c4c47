"""Pytest configuration and fixtures shared across all test modules."""

import os

# Set before any import that builds settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import Mock

import pytest

from tzguard.adapters.rate_limit.in_memory import FixedWindowRateLimiter
from tzguard.core.rate_limit import reset_rate_limiter


@pytest.fixture
def clock() -> Mock:
    """Deterministic UNIX-seconds clock; tests move it via ``return_value``."""
    return Mock(return_value=1000.0)


@pytest.fixture
def limiter(clock: Mock):
    """Fresh process-wide limiter driven by the mock clock."""
    fresh = FixedWindowRateLimiter(clock=clock)
    reset_rate_limiter(fresh)
    yield fresh
    reset_rate_limiter(None)
