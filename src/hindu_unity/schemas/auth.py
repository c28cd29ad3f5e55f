"""Authentication request and response schemas."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .profile import ProfileResponse

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def normalize_email(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class SignUpRequest(BaseModel):
    """Schema for creating a new account."""

    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN)
    password: str = Field(..., max_length=128)
    confirm_password: str = Field(..., max_length=128)
    full_name: str = Field(..., min_length=1, max_length=100)
    role: Literal["member", "volunteer", "executive"] = "member"

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: object) -> object:
        return normalize_email(value)

    @field_validator("full_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name is required")
        return value


class SignInRequest(BaseModel):
    """Schema for email/password sign-in."""

    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: object) -> object:
        return normalize_email(value)


class TokenResponse(BaseModel):
    """Bearer token issued after a successful sign-up or sign-in.

    `access_token` is null for executives who still await approval.
    """

    access_token: str | None = None
    token_type: str = "bearer"
    profile: ProfileResponse


class PasswordResetRequest(BaseModel):
    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN)

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: object) -> object:
        return normalize_email(value)


class PasswordResetConfirm(BaseModel):
    """Completes a reset using the recovery token from the emailed link."""

    access_token: str = Field(..., min_length=1)
    password: str = Field(..., max_length=128)
    confirm_password: str = Field(..., max_length=128)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., max_length=128)
    new_password: str = Field(..., max_length=128)
    confirm_password: str = Field(..., max_length=128)
