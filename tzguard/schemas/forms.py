"""Pydantic schemas for form validation requests and responses.

Request models accept the camelCase names the web client sends
(``confirmPassword``, ``displayName``, ``scheduledTime``) as well as the
snake_case field names used by the validators.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class AuthCredentialsRequest(BaseModel):
    """Login (no confirm password) or signup credentials."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field("", description="Account email address.")
    password: str = Field("", description="Candidate password.")
    confirm_password: str | None = Field(
        None,
        alias="confirmPassword",
        description="Present on signup only; must equal password.",
    )


class UserProfileRequest(BaseModel):
    """Profile update. Every field is optional."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(None, alias="displayName")
    username: str | None = None
    bio: str | None = None
    email: str | None = None
    website: str | None = None


class LinkCreationRequest(BaseModel):
    """A timezone link about to be created."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field("", description="Link title (sanitized before validation).")
    description: str | None = Field(None, description="Optional link description.")
    scheduled_time: datetime | str | None = Field(
        None,
        alias="scheduledTime",
        description="ISO-8601 instant; naive values are read as UTC.",
    )
    timezone: str | None = Field(None, description="IANA timezone name of the event.")


class ValidationResponse(BaseModel):
    is_valid: bool = Field(..., description="True exactly when errors is empty.")
    errors: Dict[str, str] = Field(
        default_factory=dict,
        description="Field name -> first failing rule message.",
    )


class PasswordScoreResponse(BaseModel):
    is_valid: bool = Field(..., description="True when score >= 75.")
    score: int = Field(..., ge=0, le=100)
    feedback: List[str] = Field(default_factory=list)


class PasswordScoreRequest(BaseModel):
    password: str = ""


class AuthValidationResponse(ValidationResponse):
    password_strength: PasswordScoreResponse | None = Field(
        None,
        description="Strength feedback, included on signup only.",
    )


class LinkValidationResponse(ValidationResponse):
    title: str = Field(..., description="Sanitized title.")
    description: str | None = Field(None, description="Sanitized description.")
    slug: str | None = Field(None, description="Generated slug when the link is valid.")


class CsrfTokenResponse(BaseModel):
    token: str


class CsrfVerifyRequest(BaseModel):
    submitted: str = ""
    stored: str = ""


class CsrfVerifyResponse(BaseModel):
    valid: bool
