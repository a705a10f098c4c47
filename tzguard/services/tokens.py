"""Random token generation and CSRF token checks."""

from __future__ import annotations

import secrets
import string
from typing import Any

TOKEN_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
DEFAULT_TOKEN_LENGTH = 32
CSRF_TOKEN_LENGTH = 32


def generate_token(length: int = DEFAULT_TOKEN_LENGTH) -> str:
    """Generate a random alphanumeric token from the OS CSPRNG.

    Args:
        length: Number of characters.

    Returns:
        str: Token of exactly ``length`` characters from ``[A-Za-z0-9]``.

    Raises:
        ValueError: If length is negative.
    """
    if length < 0:
        raise ValueError("length must be >= 0")
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def generate_csrf_token() -> str:
    return generate_token(CSRF_TOKEN_LENGTH)


def validate_csrf_token(submitted: Any, stored: Any) -> bool:
    """Check a submitted CSRF token against the stored one.

    Only 32-character tokens are accepted, even when both sides are equal.
    The comparison is constant-time.
    """
    if not isinstance(submitted, str) or not isinstance(stored, str):
        return False
    if len(submitted) != CSRF_TOKEN_LENGTH:
        return False
    return secrets.compare_digest(submitted.encode(), stored.encode())
