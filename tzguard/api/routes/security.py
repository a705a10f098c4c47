from __future__ import annotations

from fastapi import APIRouter, Depends

from tzguard.core.rate_limit import enforce_api_rate_limit
from tzguard.schemas.forms import (
    CsrfTokenResponse,
    CsrfVerifyRequest,
    CsrfVerifyResponse,
    PasswordScoreRequest,
    PasswordScoreResponse,
)
from tzguard.services.password_strength import score_password
from tzguard.services.tokens import generate_csrf_token, validate_csrf_token

router = APIRouter(tags=["Security"], dependencies=[Depends(enforce_api_rate_limit)])


@router.post("/password/score", response_model=PasswordScoreResponse)
async def password_score(payload: PasswordScoreRequest) -> PasswordScoreResponse:
    """Score a candidate password for live signup feedback."""
    return PasswordScoreResponse(**score_password(payload.password).to_dict())


@router.get("/csrf/token", response_model=CsrfTokenResponse)
async def csrf_token() -> CsrfTokenResponse:
    """Issue a fresh 32-character CSRF token. Storage is up to the caller."""
    return CsrfTokenResponse(token=generate_csrf_token())


@router.post("/csrf/verify", response_model=CsrfVerifyResponse)
async def csrf_verify(payload: CsrfVerifyRequest) -> CsrfVerifyResponse:
    return CsrfVerifyResponse(valid=validate_csrf_token(payload.submitted, payload.stored))
