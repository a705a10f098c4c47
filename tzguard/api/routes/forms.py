from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request

from tzguard.core.policy import LINK_CREATION_ACTION, LOGIN_ACTION
from tzguard.core.rate_limit import (
    client_identifier,
    enforce_action_rate_limit,
    enforce_api_rate_limit,
)
from tzguard.schemas.forms import (
    AuthCredentialsRequest,
    AuthValidationResponse,
    LinkCreationRequest,
    LinkValidationResponse,
    PasswordScoreResponse,
    UserProfileRequest,
    ValidationResponse,
)
from tzguard.services.password_strength import score_password
from tzguard.services.validation import (
    parse_instant,
    validate_auth_credentials,
    validate_link_creation,
    validate_user_profile,
)
from tzguard.utils.sanitizer import generate_slug, sanitize_input

router = APIRouter(tags=["Forms"], dependencies=[Depends(enforce_api_rate_limit)])


@router.post("/auth/validate", response_model=AuthValidationResponse)
async def validate_auth(payload: AuthCredentialsRequest) -> AuthValidationResponse:
    """Validate login or signup credentials.

    Each call counts as a login attempt for the submitted email, so repeated
    guesses against one account are throttled (HTTP 429). Signup payloads
    (with ``confirmPassword``) also get password strength feedback.
    """
    email = sanitize_input(payload.email)
    actor = email.lower() or "anonymous"
    enforce_action_rate_limit(LOGIN_ACTION, actor)

    result = validate_auth_credentials(payload.model_copy(update={"email": email}))

    strength = None
    if payload.confirm_password is not None:
        strength = PasswordScoreResponse(**score_password(payload.password).to_dict())

    return AuthValidationResponse(**result.to_dict(), password_strength=strength)


@router.post("/profile/validate", response_model=ValidationResponse)
async def validate_profile(payload: UserProfileRequest) -> ValidationResponse:
    return ValidationResponse(**validate_user_profile(payload).to_dict())


@router.post("/links/validate", response_model=LinkValidationResponse)
async def validate_link(
    payload: LinkCreationRequest,
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
) -> LinkValidationResponse:
    """Sanitize and validate a new link.

    Link creation is throttled per user (``X-User-ID``), falling back to the
    client address for anonymous callers. Text is cleaned but not truncated,
    so over-length fields come back as validation errors.
    """
    actor = (x_user_id or "").strip() or client_identifier(request)
    enforce_action_rate_limit(LINK_CREATION_ACTION, actor)

    title = sanitize_input(payload.title)
    description = (
        sanitize_input(payload.description) if payload.description is not None else None
    )
    cleaned = payload.model_copy(update={"title": title, "description": description})
    result = validate_link_creation(cleaned)

    slug = None
    if result.is_valid:
        scheduled = parse_instant(cleaned.scheduled_time)
        if scheduled is not None:
            slug = generate_slug(title, scheduled)

    return LinkValidationResponse(
        **result.to_dict(),
        title=title,
        description=description,
        slug=slug,
    )
