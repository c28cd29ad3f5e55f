"""Password hashing and token utilities."""
from __future__ import annotations

import os
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any, Final

from jose import JWTError, jwt
from nacl import pwhash
from nacl.exceptions import InvalidkeyError

from hindu_unity.core.settings import settings

ACCESS_TOKEN_TYPE: Final[str] = "access"
RECOVERY_TOKEN_TYPE: Final[str] = "recovery"

_TEST_MODE: Final[bool] = os.getenv("PYTEST_RUNNING", "").lower() == "true"


class TokenError(ValueError):
    """Raised when a token cannot be decoded or has the wrong purpose."""


def hash_password(password: str) -> str:
    """Return an argon2id hash of the password in modular crypt format."""
    if _TEST_MODE:
        opslimit = pwhash.argon2id.OPSLIMIT_MIN
        memlimit = pwhash.argon2id.MEMLIMIT_MIN
    else:
        opslimit = pwhash.argon2id.OPSLIMIT_INTERACTIVE
        memlimit = pwhash.argon2id.MEMLIMIT_INTERACTIVE
    hashed = pwhash.argon2id.str(password.encode("utf-8"), opslimit=opslimit, memlimit=memlimit)
    return hashed.decode("ascii")


def verify_password(password_hash: str, password: str) -> bool:
    """Return True if `password` matches the stored hash."""
    try:
        return pwhash.verify(password_hash.encode("ascii"), password.encode("utf-8"))
    except InvalidkeyError:
        return False


def _encode(subject: int, token_type: str, expires: timedelta) -> str:
    now = datetime.now(UTC)
    claims: dict[str, Any] = {
        "sub": str(subject),
        "typ": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + expires,
    }
    encoded: str = jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)
    return encoded


def create_access_token(profile_id: int) -> str:
    """Create a bearer token for an authenticated session."""
    return _encode(
        profile_id,
        ACCESS_TOKEN_TYPE,
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_recovery_token(profile_id: int) -> str:
    """Create a short-lived token that authorizes a password reset."""
    return _encode(
        profile_id,
        RECOVERY_TOKEN_TYPE,
        timedelta(minutes=settings.recovery_token_expire_minutes),
    )


def decode_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict[str, Any]:
    """Decode and validate a token, returning its claims.

    Raises:
        TokenError: If the signature, expiry, subject or purpose is invalid.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise TokenError("Could not validate credentials") from err

    if payload.get("typ") != expected_type:
        raise TokenError("Invalid token type")
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise TokenError("Could not validate credentials")
    return payload


def token_seconds_remaining(payload: dict[str, Any]) -> int:
    """Return the number of seconds until the token expires (never negative)."""
    exp = payload.get("exp")
    if exp is None:
        return 0
    remaining = int(exp) - int(datetime.now(UTC).timestamp())
    return max(remaining, 0)
