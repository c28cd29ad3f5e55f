"""Authentication endpoints for the Hindu Unity API."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.exc import IntegrityError

from hindu_unity.api.v1.dependencies import (
    SUSPENDED_DETAIL,
    CooldownServiceDep,
    CurrentUserDep,
    SessionDep,
    bearer_scheme,
)
from hindu_unity.core.security import (
    RECOVERY_TOKEN_TYPE,
    TokenError,
    create_access_token,
    create_recovery_token,
    decode_token,
    hash_password,
    token_seconds_remaining,
    verify_password,
)
from hindu_unity.core.settings import settings
from hindu_unity.models import Profile
from hindu_unity.models.profile import ROLE_EXECUTIVE
from hindu_unity.schemas.auth import (
    ChangePasswordRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from hindu_unity.schemas.common import Message
from hindu_unity.schemas.profile import ProfileResponse
from hindu_unity.services.password_reset import (
    ResetLinkSender,
    build_reset_link,
    get_reset_link_sender,
)
from hindu_unity.services.roles import is_pending_executive

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

NOT_APPROVED_DETAIL = "Your account is not approved yet."


def get_reset_link_sender_dep() -> ResetLinkSender:
    return get_reset_link_sender()


ResetLinkSenderDep = Annotated[ResetLinkSender, Depends(get_reset_link_sender_dep)]


def _check_new_password(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Passwords do not match",
        )
    if len(password) < settings.password_min_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.password_min_length} characters",
        )


def _token_response(profile: Profile) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(profile.id),
        profile=ProfileResponse.model_validate(profile),
    )


@router.post("/sign-up", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(payload: SignUpRequest, db: SessionDep) -> TokenResponse:
    """Create an account and sign it in.

    Executives are created unapproved and receive no token until a super
    admin approves them.

    Args:
        payload: Sign-up form
        db: Database session

    Returns:
        Bearer token and the new profile

    Raises:
        HTTPException: If the passwords are invalid or the email is taken
    """
    _check_new_password(payload.password, payload.confirm_password)
    if db.query(Profile.id).filter(Profile.email == payload.email).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )

    profile = Profile(
        email=payload.email,
        password_hash=hash_password(payload.password),
        full_name=payload.full_name,
        role=payload.role,
        is_approved=payload.role != ROLE_EXECUTIVE,
    )
    try:
        with db.begin_nested():
            db.add(profile)
    except IntegrityError as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        ) from err
    db.commit()
    db.refresh(profile)
    logger.info("Created %s profile %s", profile.role, profile.id)
    if is_pending_executive(profile):
        return TokenResponse(profile=ProfileResponse.model_validate(profile))
    return _token_response(profile)


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(payload: SignInRequest, db: SessionDep) -> TokenResponse:
    """Exchange email and password for a bearer token.

    Raises:
        HTTPException: 401 for bad credentials; 403 for suspended accounts and
            executives awaiting approval
    """
    profile = db.query(Profile).filter(Profile.email == payload.email).first()
    if profile is None or not verify_password(profile.password_hash, payload.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if profile.is_suspended:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=SUSPENDED_DETAIL)
    if is_pending_executive(profile):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=NOT_APPROVED_DETAIL)
    return _token_response(profile)


@router.post("/sign-out", response_model=Message)
async def sign_out(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    current_user: CurrentUserDep,
    cooldown: CooldownServiceDep,
) -> Message:
    """Revoke the presented token for the rest of its lifetime."""
    payload = decode_token(credentials.credentials)
    cooldown.revoke_token(payload["jti"], token_seconds_remaining(payload))
    logger.info("Profile %s signed out", current_user.id)
    return Message(message="Signed out")


@router.get("/session", response_model=ProfileResponse)
async def get_session(current_user: CurrentUserDep) -> Profile:
    """Return the profile behind the current session."""
    return current_user


@router.post(
    "/password-reset",
    response_model=Message,
    status_code=status.HTTP_202_ACCEPTED,
)
async def request_password_reset(
    payload: PasswordResetRequest,
    db: SessionDep,
    cooldown: CooldownServiceDep,
    send_link: ResetLinkSenderDep,
) -> Message:
    """Send a reset link if the email belongs to an account.

    The reply does not reveal whether the account exists. Repeat requests for
    the same address are refused until the cooldown elapses.

    Raises:
        HTTPException: 429 while the cooldown for this email is running
    """
    if not cooldown.start_password_reset_cooldown(payload.email):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=(
                "Please wait "
                f"{settings.password_reset_cooldown_seconds} seconds before requesting another reset"
            ),
        )

    profile = db.query(Profile).filter(Profile.email == payload.email).first()
    if profile is not None:
        send_link(profile.email, build_reset_link(create_recovery_token(profile.id)))
    return Message(message="If an account exists for this email, a reset link has been sent")


@router.post("/password-reset/confirm", response_model=Message)
async def reset_password(
    payload: PasswordResetConfirm,
    db: SessionDep,
    cooldown: CooldownServiceDep,
) -> Message:
    """Set a new password using a recovery token. Each token works once."""
    _check_new_password(payload.password, payload.confirm_password)
    try:
        claims = decode_token(payload.access_token, expected_type=RECOVERY_TOKEN_TYPE)
    except TokenError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset link",
        ) from err

    profile = db.get(Profile, int(claims["sub"]))
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset link",
        )
    if not cooldown.consume_token(claims["jti"], token_seconds_remaining(claims)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This reset link has already been used",
        )

    profile.password_hash = hash_password(payload.password)
    db.commit()
    logger.info("Password reset completed for profile %s", profile.id)
    return Message(message="Password updated")


@router.post("/change-password", response_model=Message)
async def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Message:
    """Change the password of the signed-in member."""
    if not verify_password(current_user.password_hash, payload.current_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )
    _check_new_password(payload.new_password, payload.confirm_password)
    current_user.password_hash = hash_password(payload.new_password)
    db.commit()
    return Message(message="Password updated")
