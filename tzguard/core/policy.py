"""Process-wide security policy.

Regex/length constants, the Content-Security-Policy directive table and the
per-action rate limit budgets. Built once from settings at import time and
shared read-only by the sanitizer, validators, scorer and limiter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from tzguard.adapters.rate_limit.base import RateLimitPolicy
from tzguard.core.config import Settings, settings

LOGIN_ACTION = "login"
LINK_CREATION_ACTION = "link-creation"
API_ACTION = "api"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,50}$")
SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

CSP_DIRECTIVES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "default-src": ("'self'",),
        "script-src": ("'self'", "'unsafe-inline'", "https://cdn.jsdelivr.net"),
        "style-src": ("'self'", "'unsafe-inline'", "https://fonts.googleapis.com"),
        "font-src": ("'self'", "https://fonts.gstatic.com"),
        "img-src": ("'self'", "data:", "https:", "blob:"),
        "connect-src": ("'self'", "https://*.supabase.co", "https://api.qrserver.com"),
        "frame-ancestors": ("'none'",),
        "base-uri": ("'self'",),
        "form-action": ("'self'",),
    }
)

SECURITY_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "X-XSS-Protection": "1; mode=block",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    }
)


@dataclass(frozen=True)
class SecurityPolicy:
    """Immutable policy table. Never mutate at runtime."""

    email_pattern: re.Pattern[str] = EMAIL_PATTERN
    username_pattern: re.Pattern[str] = USERNAME_PATTERN
    slug_pattern: re.Pattern[str] = SLUG_PATTERN
    slug_min_length: int = 3
    slug_max_length: int = 100
    max_title_length: int = 200
    max_description_length: int = 1000
    max_bio_length: int = 500
    max_display_name_length: int = 100
    min_password_length: int = 8
    csp_directives: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: CSP_DIRECTIVES)
    security_headers: Mapping[str, str] = field(default_factory=lambda: SECURITY_HEADERS)
    rate_limits: Mapping[str, RateLimitPolicy] = field(
        default_factory=lambda: MappingProxyType(
            {
                LOGIN_ACTION: RateLimitPolicy(max_requests=5, window_ms=300_000),
                LINK_CREATION_ACTION: RateLimitPolicy(max_requests=10, window_ms=60_000),
                API_ACTION: RateLimitPolicy(max_requests=100, window_ms=60_000),
            }
        )
    )

    def rate_limit_for(self, action: str) -> RateLimitPolicy:
        """Return the budget for an action class.

        Raises:
            KeyError: If no budget is configured for ``action``.
        """
        return self.rate_limits[action]

    def content_security_policy(self) -> str:
        """Render the directive table as a CSP header value."""
        return "; ".join(
            f"{directive} {' '.join(sources)}"
            for directive, sources in self.csp_directives.items()
        )


def build_security_policy(cfg: Settings | None = None) -> SecurityPolicy:
    """Derive the policy table from settings.

    Args:
        cfg: Settings to read; defaults to the global settings.

    Returns:
        A frozen SecurityPolicy.
    """

    cfg = cfg or settings
    app_cfg = cfg.app
    val_cfg = cfg.validation

    rate_limits = MappingProxyType(
        {
            LOGIN_ACTION: RateLimitPolicy(
                max_requests=app_cfg.login_rate_limit_requests,
                window_ms=app_cfg.login_rate_limit_window_ms,
            ),
            LINK_CREATION_ACTION: RateLimitPolicy(
                max_requests=app_cfg.link_rate_limit_requests,
                window_ms=app_cfg.link_rate_limit_window_ms,
            ),
            API_ACTION: RateLimitPolicy(
                max_requests=app_cfg.api_rate_limit_requests,
                window_ms=app_cfg.api_rate_limit_window_ms,
            ),
        }
    )

    return SecurityPolicy(
        max_title_length=val_cfg.max_title_length,
        max_description_length=val_cfg.max_description_length,
        max_bio_length=val_cfg.max_bio_length,
        max_display_name_length=val_cfg.max_display_name_length,
        min_password_length=val_cfg.min_password_length,
        rate_limits=rate_limits,
    )


security_policy = build_security_policy()
