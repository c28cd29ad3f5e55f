"""Live stream session endpoints.

Video transport is handled by the streaming provider; these endpoints only
track which broadcasts are on air.
"""

from __future__ import annotations

import secrets

from fastapi import APIRouter, HTTPException, status

from hindu_unity.api.v1.dependencies import (
    ChangeFeedDep,
    CurrentUserDep,
    OrganizerDep,
    SessionDep,
)
from hindu_unity.db.time import utcnow
from hindu_unity.models import LiveStream
from hindu_unity.schemas.live_stream import (
    LiveStreamCreate,
    LiveStreamOwnerResponse,
    LiveStreamResponse,
)

router = APIRouter(prefix="/live-streams", tags=["live-streams"])


@router.get("/", response_model=list[LiveStreamResponse])
async def list_live_streams(db: SessionDep, current_user: CurrentUserDep) -> list[LiveStream]:
    """Broadcasts currently on air, most recently started first."""
    return (
        db.query(LiveStream)
        .filter(LiveStream.is_live.is_(True))
        .order_by(LiveStream.started_at.desc(), LiveStream.id.desc())
        .all()
    )


@router.post("/", response_model=LiveStreamOwnerResponse, status_code=status.HTTP_201_CREATED)
async def start_live_stream(
    payload: LiveStreamCreate,
    current_user: OrganizerDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> LiveStream:
    """Go live; the response carries the private stream key."""
    stream = LiveStream(
        user_id=current_user.id,
        title=payload.title,
        description=(payload.description or "").strip() or None,
        stream_key=secrets.token_urlsafe(24),
        is_live=True,
    )
    db.add(stream)
    db.commit()
    db.refresh(stream)

    feed.publish("live_streams", "INSERT", stream.id)
    return stream


@router.post("/{stream_id}/end", response_model=LiveStreamResponse)
async def end_live_stream(
    stream_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> LiveStream:
    stream = db.get(LiveStream, stream_id)
    if stream is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Live stream not found")
    if stream.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only end your own stream",
        )
    if stream.is_live:
        stream.is_live = False
        stream.ended_at = utcnow()
        db.commit()
        feed.publish("live_streams", "UPDATE", stream.id)
    return stream
