"""Shared API dependencies for authentication and common functionality."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import timedelta
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hindu_unity.core.security import TokenError, decode_token, token_seconds_remaining
from hindu_unity.core.settings import settings
from hindu_unity.db.session import SessionLocal, get_db
from hindu_unity.db.time import as_utc, utcnow
from hindu_unity.models import Profile
from hindu_unity.models.profile import ROLE_SUPER_ADMIN
from hindu_unity.services.cooldown import CooldownService, get_cooldown_service
from hindu_unity.services.geocoding import GeocodingClient, get_geocoding_client
from hindu_unity.services.media import MediaClient, get_media_client
from hindu_unity.services.realtime import ChangeFeed, get_change_feed
from hindu_unity.services.roles import MANAGER_ROLES, ORGANIZER_ROLES, has_any_role

logger = logging.getLogger(__name__)

SUSPENDED_DETAIL = "Your account has been suspended by an administrator"
FORBIDDEN_DETAIL = "You do not have permission to perform this action"

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

SessionFactory = Callable[[], AbstractContextManager[Session]]


def get_session_factory() -> SessionFactory:
    """Return the factory for sessions scoped to a `with` block.

    Long-lived connections such as websockets use it instead of
    :data:`SessionDep`, which would hold a pooled connection until they close.
    """
    return SessionLocal


SessionFactoryDep = Annotated[SessionFactory, Depends(get_session_factory)]


def get_cooldown_service_dep() -> CooldownService:
    """Return the shared cooldown service."""
    return get_cooldown_service()


def get_media_client_dep() -> MediaClient:
    """Return the shared media companion client."""
    return get_media_client()


def get_geocoding_client_dep() -> GeocodingClient:
    """Return the shared places API client."""
    return get_geocoding_client()


def get_change_feed_dep() -> ChangeFeed:
    """Return the process-wide realtime change feed."""
    return get_change_feed()


CooldownServiceDep = Annotated[CooldownService, Depends(get_cooldown_service_dep)]
MediaClientDep = Annotated[MediaClient, Depends(get_media_client_dep)]
GeocodingClientDep = Annotated[GeocodingClient, Depends(get_geocoding_client_dep)]
ChangeFeedDep = Annotated[ChangeFeed, Depends(get_change_feed_dep)]


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _touch_last_seen(db: Session, profile: Profile) -> None:
    """Record activity for the live-user counter, at most once per resolution window."""
    now = utcnow()
    last_seen = as_utc(profile.last_seen_at)
    resolution = timedelta(seconds=settings.last_seen_resolution_seconds)
    if last_seen is None or now - last_seen >= resolution:
        profile.last_seen_at = now
        db.commit()


def authenticate_token(token: str, db: Session, cooldown: CooldownService) -> Profile:
    """Resolve a bearer token to its profile.

    Args:
        token: Encoded access token
        db: Database session
        cooldown: Store holding revoked token ids

    Returns:
        Profile the token was issued to

    Raises:
        HTTPException: 401 if the token is invalid, revoked or orphaned;
            403 if the account is suspended (the token is revoked as well)
    """
    try:
        payload = decode_token(token)
    except TokenError as err:
        raise _unauthorized() from err

    jti = payload.get("jti")
    if jti and cooldown.is_token_revoked(jti):
        raise _unauthorized("Session has been signed out")

    profile = db.get(Profile, int(payload["sub"]))
    if profile is None:
        raise _unauthorized("User not found")

    if profile.is_suspended:
        if jti:
            cooldown.revoke_token(jti, token_seconds_remaining(payload))
        logger.info("Terminated session of suspended profile %s", profile.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=SUSPENDED_DETAIL)

    _touch_last_seen(db, profile)
    return profile


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
    cooldown: CooldownServiceDep,
) -> Profile:
    """Get the current authenticated profile from the bearer token."""
    return authenticate_token(credentials.credentials, db, cooldown)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)],
    db: SessionDep,
    cooldown: CooldownServiceDep,
) -> Profile | None:
    """Like :func:`get_current_user` but returns None for anonymous requests."""
    if credentials is None:
        return None
    return authenticate_token(credentials.credentials, db, cooldown)


# Type alias for current user dependency
CurrentUserDep = Annotated[Profile, Depends(get_current_user)]
OptionalUserDep = Annotated[Profile | None, Depends(get_optional_user)]


def require_roles(*roles: str) -> Callable[[Profile], Profile]:
    """Build a dependency that admits only profiles holding one of `roles`."""
    allowed = frozenset(roles)

    def _checker(current_user: CurrentUserDep) -> Profile:
        if not has_any_role(current_user, allowed):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_DETAIL)
        return current_user

    return _checker


OrganizerDep = Annotated[Profile, Depends(require_roles(*ORGANIZER_ROLES))]
ManagerDep = Annotated[Profile, Depends(require_roles(*MANAGER_ROLES))]
SuperAdminDep = Annotated[Profile, Depends(require_roles(ROLE_SUPER_ADMIN))]
