"""Password quality scoring for signup feedback.

Scoring is advisory UI feedback; it does not hash or store anything.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable

POINTS_PER_CHECK = 25
MIN_SCORE = 0
MAX_SCORE = 100
VALID_THRESHOLD = 75
MIN_LENGTH = 8


@dataclass(frozen=True)
class PasswordScore:
    """Outcome of scoring one candidate password."""

    score: int
    feedback: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.score >= VALID_THRESHOLD

    def to_dict(self) -> dict[str, object]:
        return {
            "is_valid": self.is_valid,
            "score": self.score,
            "feedback": list(self.feedback),
        }


# Ordered: feedback follows this order.
_CHECKS: tuple[tuple[Callable[[str], bool], str], ...] = (
    (lambda pw: len(pw) >= MIN_LENGTH, "Password must be at least 8 characters long"),
    (lambda pw: re.search(r"[A-Z]", pw) is not None, "Add uppercase letters"),
    (lambda pw: re.search(r"[a-z]", pw) is not None, "Add lowercase letters"),
    (lambda pw: re.search(r"[0-9]", pw) is not None, "Add numbers"),
    (lambda pw: re.search(r"[^A-Za-z0-9]", pw) is not None, "Add special characters"),
)


def score_password(password: str) -> PasswordScore:
    """Score a password out of 100 with feedback for each failed check.

    Each of five checks (length, uppercase, lowercase, digit, special
    character) is worth 25 points. A score of 75 or more is acceptable.

    Args:
        password: Candidate password.

    Returns:
        PasswordScore: Clamped score and ordered feedback.

    Examples:
        >>> score_password("Aa1!aaaa").score
        100
        >>> score_password("").feedback[0]
        'Password must be at least 8 characters long'
    """
    score = 0
    feedback: list[str] = []

    for check, message in _CHECKS:
        if check(password):
            score += POINTS_PER_CHECK
        else:
            feedback.append(message)

    return PasswordScore(score=min(max(score, MIN_SCORE), MAX_SCORE), feedback=feedback)
