"""Profile and follow endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from hindu_unity.api.v1.dependencies import (
    CurrentUserDep,
    OptionalUserDep,
    SessionDep,
)
from hindu_unity.api.v1.endpoints.posts import user_posts
from hindu_unity.models import Follow, ImportedAccount, Profile
from hindu_unity.schemas.common import AuthorSummary
from hindu_unity.schemas.post import PostResponse
from hindu_unity.schemas.profile import (
    AvatarUpdate,
    Capabilities,
    ClaimStatus,
    ProfileResponse,
    ProfileUpdate,
    PublicProfileResponse,
)
from hindu_unity.services.post_views import build_post_views
from hindu_unity.services.roles import capabilities

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _get_profile_or_404(db: Session, user_id: int) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return profile


@router.get("/me", response_model=ProfileResponse)
async def get_me(current_user: CurrentUserDep) -> Profile:
    return current_user


@router.patch("/me", response_model=ProfileResponse)
async def update_me(payload: ProfileUpdate, current_user: CurrentUserDep, db: SessionDep) -> Profile:
    """Update the caller's name and bio. A blank bio clears it."""
    if payload.full_name is not None:
        full_name = payload.full_name.strip()
        if not full_name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Full name cannot be empty",
            )
        current_user.full_name = full_name
    if payload.bio is not None:
        current_user.bio = payload.bio.strip() or None
    db.commit()
    return current_user


@router.put("/me/avatar", response_model=ProfileResponse)
async def set_avatar(payload: AvatarUpdate, current_user: CurrentUserDep, db: SessionDep) -> Profile:
    """Store the public URL of an avatar uploaded through a pre-signed URL."""
    current_user.avatar_url = payload.avatar_url
    db.commit()
    return current_user


@router.get("/me/capabilities", response_model=Capabilities)
async def get_capabilities(current_user: CurrentUserDep) -> Capabilities:
    """Return which sections the caller's role unlocks."""
    return Capabilities(role=current_user.role, **capabilities(current_user))


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def get_profile(user_id: int, db: SessionDep, viewer: OptionalUserDep) -> PublicProfileResponse:
    """Return a member's public profile with follow counts."""
    profile = _get_profile_or_404(db, user_id)
    follower_count = (
        db.query(func.count()).select_from(Follow).filter(Follow.following_id == user_id).scalar()
    )
    following_count = (
        db.query(func.count()).select_from(Follow).filter(Follow.follower_id == user_id).scalar()
    )
    is_following = viewer is not None and db.get(Follow, (viewer.id, user_id)) is not None
    return PublicProfileResponse(
        id=profile.id,
        full_name=profile.full_name,
        role=profile.role,
        bio=profile.bio,
        avatar_url=profile.avatar_url,
        created_at=profile.created_at,
        follower_count=follower_count or 0,
        following_count=following_count or 0,
        is_following=is_following,
    )


@router.get("/{user_id}/posts", response_model=list[PostResponse])
async def list_user_posts(
    user_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> list[PostResponse]:
    """List a member's posts, their pinned posts first."""
    profile = _get_profile_or_404(db, user_id)
    return build_post_views(db, user_posts(db, profile), viewer.id if viewer else None)


@router.get("/{user_id}/claim-status", response_model=ClaimStatus)
async def get_claim_status(user_id: int, db: SessionDep) -> ClaimStatus:
    """Report whether the profile was imported and whether it has been claimed."""
    _get_profile_or_404(db, user_id)
    imported = db.get(ImportedAccount, user_id)
    if imported is None:
        return ClaimStatus(user_id=user_id, imported=False, claimed=False)
    return ClaimStatus(
        user_id=user_id,
        imported=True,
        claimed=imported.claimed,
        username=imported.username,
    )


@router.post(
    "/{user_id}/follow",
    response_model=PublicProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def follow(user_id: int, current_user: CurrentUserDep, db: SessionDep) -> PublicProfileResponse:
    """Follow another member."""
    _get_profile_or_404(db, user_id)
    if user_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot follow yourself",
        )
    if db.get(Follow, (current_user.id, user_id)) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You are already following this user",
        )
    db.add(Follow(follower_id=current_user.id, following_id=user_id))
    db.commit()
    return await get_profile(user_id, db, current_user)


@router.delete("/{user_id}/follow", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow(user_id: int, current_user: CurrentUserDep, db: SessionDep) -> Response:
    edge = db.get(Follow, (current_user.id, user_id))
    if edge is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="You are not following this user",
        )
    db.delete(edge)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/followers", response_model=list[AuthorSummary])
async def list_followers(user_id: int, db: SessionDep) -> list[Profile]:
    """Profiles following `user_id`, most recent follow first."""
    _get_profile_or_404(db, user_id)
    return (
        db.query(Profile)
        .join(Follow, Follow.follower_id == Profile.id)
        .filter(Follow.following_id == user_id)
        .order_by(Follow.created_at.desc())
        .all()
    )


@router.get("/{user_id}/following", response_model=list[AuthorSummary])
async def list_following(user_id: int, db: SessionDep) -> list[Profile]:
    """Profiles `user_id` follows, most recent follow first."""
    _get_profile_or_404(db, user_id)
    return (
        db.query(Profile)
        .join(Follow, Follow.following_id == Profile.id)
        .filter(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc())
        .all()
    )
