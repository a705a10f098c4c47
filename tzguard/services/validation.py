"""Form validation for auth credentials, user profiles and link creation.

Rules are data: each form maps field names to an ordered tuple of
``Rule(check, message)``. For every field the first failing rule produces
that field's message; all fields are always evaluated so the caller gets
every error at once. Adding a form means adding a table, not control flow.

Messages are ``str.format`` templates rendered with the active policy, e.g.
``"Bio must be less than {policy.max_bio_length} characters"``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from pydantic import AnyUrl, BaseModel, TypeAdapter, ValidationError

from tzguard.core.policy import SecurityPolicy, security_policy
from tzguard.utils.sanitizer import validate_timezone

logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyUrl)


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may look at besides the field value."""

    data: Mapping[str, Any]
    now: datetime
    policy: SecurityPolicy


RuleCheck = Callable[[Any, RuleContext], bool]


@dataclass(frozen=True)
class Rule:
    check: RuleCheck
    message: str


def _always(value: Any) -> bool:
    return True


def _truthy(value: Any) -> bool:
    return bool(value)


def _provided(value: Any) -> bool:
    return value is not None


@dataclass(frozen=True)
class FieldRules:
    """Ordered rules for one field.

    Attributes:
        rules: Checked in order; the first failure wins.
        applies: Presence test; when it returns False the field is skipped.
    """

    rules: tuple[Rule, ...]
    applies: Callable[[Any], bool] = _always


FormRules = Mapping[str, FieldRules]


@dataclass(frozen=True)
class ValidationResult:
    """Per-field error messages. Valid exactly when there are none."""

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {"is_valid": self.is_valid, "errors": dict(self.errors)}


# --- predicates ---------------------------------------------------------------


def _non_empty(value: Any, ctx: RuleContext) -> bool:
    return bool(value)


def _non_blank(value: Any, ctx: RuleContext) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_email(value: Any, ctx: RuleContext) -> bool:
    return isinstance(value, str) and ctx.policy.email_pattern.fullmatch(value) is not None


def _is_username(value: Any, ctx: RuleContext) -> bool:
    return isinstance(value, str) and ctx.policy.username_pattern.fullmatch(value) is not None


def _max_length(attr: str) -> RuleCheck:
    def check(value: Any, ctx: RuleContext) -> bool:
        return isinstance(value, str) and len(value) <= getattr(ctx.policy, attr)

    return check


def _min_password_length(value: Any, ctx: RuleContext) -> bool:
    return isinstance(value, str) and len(value) >= ctx.policy.min_password_length


def _matches_password(value: Any, ctx: RuleContext) -> bool:
    return value == ctx.data.get("password")


def _is_absolute_url(value: Any, ctx: RuleContext) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def parse_instant(value: Any) -> datetime | None:
    """Parse a datetime or ISO-8601 string; naive values are taken as UTC."""

    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, str) and value.strip():
        try:
            instant = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant


def _is_instant(value: Any, ctx: RuleContext) -> bool:
    return parse_instant(value) is not None


def _not_in_past(value: Any, ctx: RuleContext) -> bool:
    instant = parse_instant(value)
    return instant is not None and instant >= ctx.now


def _is_timezone(value: Any, ctx: RuleContext) -> bool:
    return validate_timezone(value)


# --- rule tables --------------------------------------------------------------

INVALID_EMAIL = "Please enter a valid email address"

AUTH_CREDENTIALS_RULES: FormRules = {
    "email": FieldRules(
        rules=(
            Rule(_non_empty, "Email is required"),
            Rule(_is_email, INVALID_EMAIL),
        ),
    ),
    "password": FieldRules(
        rules=(
            Rule(_non_empty, "Password is required"),
            Rule(
                _min_password_length,
                "Password must be at least {policy.min_password_length} characters long",
            ),
        ),
    ),
    # Present only on signup; its absence marks a login attempt.
    "confirm_password": FieldRules(
        rules=(Rule(_matches_password, "Passwords do not match"),),
        applies=_provided,
    ),
}

USER_PROFILE_RULES: FormRules = {
    "display_name": FieldRules(
        rules=(
            Rule(
                _max_length("max_display_name_length"),
                "Display name must be less than {policy.max_display_name_length} characters",
            ),
        ),
        applies=_truthy,
    ),
    "username": FieldRules(
        rules=(
            Rule(
                _is_username,
                "Username must be 3-50 characters and contain only letters, "
                "numbers, underscores, and hyphens",
            ),
        ),
        applies=_truthy,
    ),
    "bio": FieldRules(
        rules=(
            Rule(
                _max_length("max_bio_length"),
                "Bio must be less than {policy.max_bio_length} characters",
            ),
        ),
        applies=_truthy,
    ),
    "email": FieldRules(rules=(Rule(_is_email, INVALID_EMAIL),), applies=_truthy),
    "website": FieldRules(
        rules=(Rule(_is_absolute_url, "Please enter a valid website URL"),),
        applies=_truthy,
    ),
}

LINK_CREATION_RULES: FormRules = {
    "title": FieldRules(
        rules=(
            Rule(_non_blank, "Title is required"),
            Rule(
                _max_length("max_title_length"),
                "Title must be less than {policy.max_title_length} characters",
            ),
        ),
    ),
    "description": FieldRules(
        rules=(
            Rule(
                _max_length("max_description_length"),
                "Description must be less than {policy.max_description_length} characters",
            ),
        ),
        applies=_truthy,
    ),
    "scheduled_time": FieldRules(
        rules=(
            Rule(_is_instant, "Valid scheduled time is required"),
            Rule(_not_in_past, "Scheduled time cannot be in the past"),
        ),
    ),
    "timezone": FieldRules(
        rules=(Rule(_is_timezone, "Please select a valid timezone"),),
        applies=_provided,
    ),
}

FORM_RULES: Mapping[str, FormRules] = {
    "auth_credentials": AUTH_CREDENTIALS_RULES,
    "user_profile": USER_PROFILE_RULES,
    "link_creation": LINK_CREATION_RULES,
}


# --- engine -------------------------------------------------------------------


def _as_mapping(data: Mapping[str, Any] | BaseModel | None) -> Mapping[str, Any]:
    if data is None:
        return {}
    if isinstance(data, BaseModel):
        return data.model_dump()
    return data


def _passes(rule: Rule, value: Any, ctx: RuleContext) -> bool:
    # Malformed input is a field failure, never an exception for the caller.
    try:
        return bool(rule.check(value, ctx))
    except (TypeError, ValueError):
        return False


def apply_rules(
    form: str,
    rules: FormRules,
    data: Mapping[str, Any] | BaseModel | None,
    *,
    now: datetime | None = None,
    policy: SecurityPolicy = security_policy,
) -> ValidationResult:
    """Run a rule table against form data.

    Args:
        form: Form name, used for logging only.
        rules: Field -> FieldRules table.
        data: Submitted values (mapping or pydantic model).
        now: Current time for time-dependent rules; defaults to UTC now.
        policy: Policy supplying patterns and limits.

    Returns:
        ValidationResult with one message per failing field.
    """

    values = _as_mapping(data)
    current = now if now is not None else datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    ctx = RuleContext(data=values, now=current, policy=policy)

    errors: dict[str, str] = {}
    for field_name, field_rules in rules.items():
        value = values.get(field_name)
        if not field_rules.applies(value):
            continue
        for rule in field_rules.rules:
            if not _passes(rule, value, ctx):
                errors[field_name] = rule.message.format(policy=policy)
                break

    if errors:
        logger.info(
            "validation.failed",
            extra={"form": form, "fields": sorted(errors)},
        )
    return ValidationResult(errors=errors)


def validate_form(
    form: str,
    data: Mapping[str, Any] | BaseModel | None,
    *,
    now: datetime | None = None,
    policy: SecurityPolicy = security_policy,
) -> ValidationResult:
    """Validate ``data`` with a registered form table.

    Raises:
        KeyError: If ``form`` has no registered rules.
    """
    return apply_rules(form, FORM_RULES[form], data, now=now, policy=policy)


def validate_auth_credentials(
    data: Mapping[str, Any] | BaseModel | None,
    *,
    policy: SecurityPolicy = security_policy,
) -> ValidationResult:
    """Validate login (no confirm_password) or signup credentials."""
    return apply_rules("auth_credentials", AUTH_CREDENTIALS_RULES, data, policy=policy)


def validate_user_profile(
    data: Mapping[str, Any] | BaseModel | None,
    *,
    policy: SecurityPolicy = security_policy,
) -> ValidationResult:
    return apply_rules("user_profile", USER_PROFILE_RULES, data, policy=policy)


def validate_link_creation(
    data: Mapping[str, Any] | BaseModel | None,
    *,
    now: datetime | None = None,
    policy: SecurityPolicy = security_policy,
) -> ValidationResult:
    """Validate a new link.

    A scheduled time equal to ``now`` is accepted; anything earlier is not.
    """
    return apply_rules("link_creation", LINK_CREATION_RULES, data, now=now, policy=policy)
