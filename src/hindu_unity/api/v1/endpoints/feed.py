"""Home feed endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from hindu_unity.api.v1.dependencies import OptionalUserDep, SessionDep
from hindu_unity.core.settings import settings
from hindu_unity.models import Event, Post
from hindu_unity.schemas.event import EventResponse
from hindu_unity.schemas.feed import FeedItem, FeedPage
from hindu_unity.schemas.post import PostResponse
from hindu_unity.services.feed import (
    KIND_POST,
    CursorError,
    decode_cursor,
    fetch_feed_page,
    pinned_posts,
)
from hindu_unity.services.post_views import build_post_views

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("/", response_model=FeedPage)
async def get_feed(
    db: SessionDep,
    viewer: OptionalUserDep,
    limit: int = Query(settings.feed_page_size, ge=1, le=50, description="Items per page"),
    cursor: str | None = Query(None, description="Opaque cursor from the previous page"),
) -> FeedPage:
    """Return one page of posts and events merged newest first.

    Args:
        db: Database session
        viewer: Signed-in member, if any, for like and vote state
        limit: Maximum number of items to return
        cursor: `next_cursor` from the previous page

    Returns:
        Feed items and the cursor for the following page, null on the last page

    Raises:
        HTTPException: If the cursor is malformed
    """
    try:
        position = decode_cursor(cursor) if cursor else None
    except CursorError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err

    entries, next_cursor = fetch_feed_page(db, limit, position)
    posts = [entry.item for entry in entries if entry.kind == KIND_POST]
    views = {view.id: view for view in build_post_views(db, posts, viewer.id if viewer else None)}

    items = []
    for entry in entries:
        if isinstance(entry.item, Post):
            items.append(FeedItem(kind="post", post=views[entry.item.id]))
        elif isinstance(entry.item, Event):
            items.append(FeedItem(kind="event", event=EventResponse.model_validate(entry.item)))
    return FeedPage(items=items, next_cursor=next_cursor)


@router.get("/pinned", response_model=list[PostResponse])
async def get_pinned(db: SessionDep, viewer: OptionalUserDep) -> list[PostResponse]:
    """Return posts pinned by administrators, most recently pinned first."""
    return build_post_views(db, pinned_posts(db), viewer.id if viewer else None)
