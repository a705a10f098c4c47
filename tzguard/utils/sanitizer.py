"""Free-text sanitization and small text helpers for user-submitted forms."""

from __future__ import annotations

import html
import re
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tzguard.core.policy import SecurityPolicy, security_policy

_TAG_RE = re.compile(r"<[^>]*>")
_UNSAFE_CHARS_RE = re.compile(r"[<>\"'&]")
_SLUG_DROP_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")

SLUG_TITLE_CHARS = 30

# Fixed English abbreviations; strftime("%b") follows LC_TIME.
_MONTH_ABBREVIATIONS = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)


def sanitize_input(text: Any, max_length: int | None = None) -> str:
    """Strip markup and unsafe characters from free text.

    Trims, removes tag-like substrings, drops ``< > " ' &`` and finally
    truncates to ``max_length`` characters. Whitespace exposed by the removal
    or truncation is trimmed too, so the function is idempotent.

    Args:
        text: Raw input. Anything that is not a string yields "".
        max_length: Optional maximum length of the result. Negative values
            behave like 0.

    Returns:
        str: Sanitized text.

    Examples:
        >>> sanitize_input("  <b>Team</b> sync & review ")
        'Team sync  review'
        >>> sanitize_input("abcdef", 3)
        'abc'
    """
    if not isinstance(text, str):
        return ""

    sanitized = text.strip()
    sanitized = _TAG_RE.sub("", sanitized)
    sanitized = _UNSAFE_CHARS_RE.sub("", sanitized).strip()

    if max_length is not None:
        sanitized = sanitized[: max(0, max_length)].strip()

    return sanitized


def escape_html(text: str) -> str:
    """Escape text for safe display inside HTML."""
    return html.escape(text, quote=True)


def generate_slug(title: str, when: datetime) -> str:
    """Build a link slug from a title and its scheduled date.

    Args:
        title: Link title.
        when: Scheduled time; its month and day form the suffix.

    Returns:
        str: Slug such as ``team-sync-mar-5``.
    """
    title_slug = _SLUG_DROP_RE.sub("", title.lower())
    title_slug = _WHITESPACE_RE.sub("-", title_slug)[:SLUG_TITLE_CHARS]
    date_slug = f"{_MONTH_ABBREVIATIONS[when.month - 1]}-{when.day}"
    return f"{title_slug}-{date_slug}"


def validate_slug(slug: str, policy: SecurityPolicy = security_policy) -> bool:
    """Check slug charset and length."""
    return (
        policy.slug_pattern.fullmatch(slug) is not None
        and policy.slug_min_length <= len(slug) <= policy.slug_max_length
    )


def validate_timezone(name: Any) -> bool:
    """Return True when ``name`` is a resolvable IANA timezone."""
    if not isinstance(name, str) or not name.strip():
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True
