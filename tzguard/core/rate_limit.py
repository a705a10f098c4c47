"""Rate limiting wiring for the HTTP layer.

Routes never touch the record store; they name an action class and an actor
and this module builds the key, consults the process-wide limiter and turns a
rejection into a ``RateLimitAppError`` (HTTP 429).

Keys are ``<action>:<actor>``, e.g. ``login:ana@example.com`` or
``link-creation:user-42``. The generic ``api`` budget is keyed by client IP.
"""

from __future__ import annotations

import logging

from fastapi import Request

from tzguard.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from tzguard.adapters.rate_limit.in_memory import FixedWindowRateLimiter
from tzguard.core.config import settings
from tzguard.core.errors import ConfigurationAppError, RateLimitAppError
from tzguard.core.logging import hash_identifier
from tzguard.core.policy import API_ACTION, SecurityPolicy, security_policy

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return the process-wide limiter, creating it on first use."""

    global _limiter

    if _limiter is None:
        _limiter = FixedWindowRateLimiter()
    return _limiter


def reset_rate_limiter(limiter: AbstractRateLimiter | None = None) -> None:
    """Replace the process-wide limiter (tests inject clocks this way)."""

    global _limiter
    _limiter = limiter


def build_rate_limit_key(action: str, actor: str) -> str:
    return f"{action}:{actor}"


def client_identifier(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_action_rate_limit(
    action: str,
    actor: str,
    *,
    limiter: AbstractRateLimiter | None = None,
    policy: SecurityPolicy = security_policy,
) -> RateLimitResult | None:
    """Consume one unit of ``action`` budget for ``actor``.

    Args:
        action: Action class with a configured budget (login, link-creation, api).
        actor: Identity the budget is scoped to.
        limiter: Limiter to use; the process-wide one by default.
        policy: Policy supplying the action budgets.

    Returns:
        The limiter result, or None when rate limiting is disabled.

    Raises:
        RateLimitAppError: When the budget for this key is exhausted.
        ConfigurationAppError: When ``action`` has no configured budget.
    """

    if not settings.app.rate_limit_enabled:
        return None

    try:
        action_policy = policy.rate_limit_for(action)
    except KeyError as exc:
        raise ConfigurationAppError(
            code="rate_limit_policy_missing",
            message=f"No rate limit policy configured for action '{action}'",
            details={"action": action},
        ) from exc

    key = build_rate_limit_key(action, actor)
    result = (limiter or get_rate_limiter()).consume(key, action_policy)

    log_fields = {
        "action": action,
        "key_hash": hash_identifier(key),
        "limit": result.limit,
        "remaining": result.remaining,
        "window_ms": action_policy.window_ms,
    }

    if result.allowed:
        logger.info("rate_limit.allowed", extra=log_fields)
        return result

    retry_after = result.retry_after_seconds or 0
    logger.warning("rate_limit.exceeded", extra={**log_fields, "retry_after_s": retry_after})

    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message="Too many requests. Please try again later.",
        details={
            "action": action,
            "limit": result.limit,
            "remaining": result.remaining,
            "reset_at": result.reset_at,
            "retry_after": retry_after,
        },
    )


async def enforce_api_rate_limit(request: Request) -> None:
    """FastAPI dependency charging the generic per-client API budget."""

    enforce_action_rate_limit(API_ACTION, client_identifier(request))
