"""Review queue for posts collected by the external ingestion pipeline."""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, status
from sqlalchemy.orm import Session

from hindu_unity.api.v1.dependencies import ChangeFeedDep, SessionDep, SuperAdminDep
from hindu_unity.core.settings import settings
from hindu_unity.models import PendingPost, Post, Profile
from hindu_unity.models.ingestion import ACCEPTED_STATUS, PENDING_STATUS, REJECTED_STATUS
from hindu_unity.schemas.moderation import AcceptResult, PendingPostIngest, PendingPostResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/moderation", tags=["moderation"])


def _check_ingest_key(key: str | None) -> None:
    expected = settings.ingest_api_key
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Content ingestion is not configured",
        )
    if key is None or not hmac.compare_digest(key, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid ingest key")


def _get_pending_or_409(db: Session, pending_id: int) -> PendingPost:
    pending = db.get(PendingPost, pending_id)
    if pending is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pending post not found")
    if pending.status != PENDING_STATUS:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Post has already been {pending.status}",
        )
    return pending


@router.post(
    "/pending-posts",
    response_model=PendingPostResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def ingest_pending_post(
    payload: PendingPostIngest,
    db: SessionDep,
    x_ingest_key: Annotated[str | None, Header()] = None,
) -> PendingPost:
    """Queue an externally sourced post for review.

    Re-sending the same `external_id` refreshes the queued copy while it is
    still awaiting review.

    Raises:
        HTTPException: 401 for a wrong ingest key; 404 if the mapped profile
            does not exist; 409 if the post was already decided
    """
    _check_ingest_key(x_ingest_key)
    if db.get(Profile, payload.user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    pending = db.query(PendingPost).filter(PendingPost.external_id == payload.external_id).first()
    if pending is not None and pending.status != PENDING_STATUS:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Post has already been {pending.status}",
        )
    if pending is None:
        pending = PendingPost(external_id=payload.external_id)
        db.add(pending)
    for field, value in payload.model_dump(exclude={"external_id"}).items():
        setattr(pending, field, value)
    db.commit()
    db.refresh(pending)
    logger.info("Queued external post %s from %s", pending.external_id, pending.source)
    return pending


@router.get("/pending-posts", response_model=list[PendingPostResponse])
async def list_pending_posts(current_user: SuperAdminDep, db: SessionDep) -> list[PendingPost]:
    """Posts awaiting review, newest first."""
    return (
        db.query(PendingPost)
        .filter(PendingPost.status == PENDING_STATUS)
        .order_by(PendingPost.created_at.desc(), PendingPost.id.desc())
        .all()
    )


@router.post("/pending-posts/{pending_id}/accept", response_model=AcceptResult)
async def accept_pending_post(
    pending_id: int,
    current_user: SuperAdminDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> AcceptResult:
    """Publish a queued post to the feed under its mapped profile."""
    pending = _get_pending_or_409(db, pending_id)
    if db.query(Post.id).filter(Post.external_id == pending.external_id).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Post has already been published",
        )
    post = Post(
        user_id=pending.user_id,
        content=pending.content,
        post_type=pending.post_type,
        media_url=pending.media_url,
        media_urls=[pending.media_url] if pending.media_url else None,
        location=pending.location,
        source=pending.source,
        external_id=pending.external_id,
        external_username=pending.external_username,
        link_preview=pending.link_preview,
    )
    db.add(post)
    pending.status = ACCEPTED_STATUS
    db.commit()
    db.refresh(post)
    logger.info("Profile %s accepted external post %s", current_user.id, pending.external_id)

    feed.publish("posts", "INSERT", post.id)
    return AcceptResult(pending_post_id=pending.id, post_id=post.id)


@router.post("/pending-posts/{pending_id}/reject", response_model=PendingPostResponse)
async def reject_pending_post(
    pending_id: int,
    current_user: SuperAdminDep,
    db: SessionDep,
) -> PendingPost:
    pending = _get_pending_or_409(db, pending_id)
    pending.status = REJECTED_STATUS
    db.commit()
    return pending
