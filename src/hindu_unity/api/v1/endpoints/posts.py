"""Post-related endpoints for the Hindu Unity API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy.orm import Session

from hindu_unity.api.v1.dependencies import (
    ChangeFeedDep,
    CurrentUserDep,
    ManagerDep,
    MediaClientDep,
    OptionalUserDep,
    SessionDep,
)
from hindu_unity.db.time import utcnow
from hindu_unity.models import Comment, PollOption, Post, Profile
from hindu_unity.models.profile import ROLE_SUPER_ADMIN
from hindu_unity.schemas.comment import CommentCreate, CommentResponse
from hindu_unity.schemas.poll import PollResults, PollVoteRequest
from hindu_unity.schemas.post import LikeResponse, PinResponse, PostCreate, PostResponse
from hindu_unity.services.media import delete_post_media
from hindu_unity.services.polls import (
    DuplicateVoteError,
    PollError,
    cast_vote,
    clean_poll_options,
    poll_results,
)
from hindu_unity.services.post_views import build_post_view, like_count
from hindu_unity.services.reactions import toggle_post_like
from hindu_unity.services.roles import effective_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


def get_post_or_404(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> PostResponse:
    """Publish a new post.

    Args:
        payload: Post content and attachments
        current_user: Authenticated author
        db: Database session
        feed: Realtime change feed

    Returns:
        The created post

    Raises:
        HTTPException: If the content does not suit the post type
    """
    content = _clean_text(payload.content)
    media_urls = [url for url in payload.media_urls or [] if url.strip()] or None
    media_url = _clean_text(payload.media_url) or (media_urls[0] if media_urls else None)

    options: list[str] = []
    if payload.post_type == "text" and content is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Post content cannot be empty",
        )
    if payload.post_type in ("image", "video") and media_url is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A {payload.post_type} post requires a media URL",
        )
    if payload.post_type == "poll":
        try:
            options = clean_poll_options(payload.poll_options)
        except PollError as err:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err

    post = Post(
        user_id=current_user.id,
        content=content,
        post_type=payload.post_type,
        media_url=media_url,
        media_urls=media_urls,
        location=_clean_text(payload.location),
        location_lat=payload.location_lat,
        location_lng=payload.location_lng,
    )
    post.poll_options = [
        PollOption(option_text=text, position=index) for index, text in enumerate(options)
    ]
    db.add(post)
    db.commit()
    db.refresh(post)

    feed.publish("posts", "INSERT", post.id)
    return build_post_view(db, post, current_user.id)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: SessionDep, viewer: OptionalUserDep) -> PostResponse:
    """Get a single post; anonymous visitors may read shared links."""
    post = get_post_or_404(db, post_id)
    return build_post_view(db, post, viewer.id if viewer else None)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    media: MediaClientDep,
    feed: ChangeFeedDep,
) -> Response:
    """Delete a post and ask the media service to drop its attachments.

    Only the author or a super admin may delete a post. Media cleanup failures
    are logged and do not undo the deletion.
    """
    post = get_post_or_404(db, post_id)
    if post.user_id != current_user.id and effective_role(current_user) != ROLE_SUPER_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own posts",
        )

    urls = list(post.media_urls or [])
    if post.media_url and post.media_url not in urls:
        urls.append(post.media_url)
    db.delete(post)
    db.commit()
    await delete_post_media(media, urls)

    feed.publish("posts", "DELETE", post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/pin", response_model=PinResponse)
async def toggle_user_pin(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> PinResponse:
    """Pin or unpin a post on the author's own profile."""
    post = get_post_or_404(db, post_id)
    if post.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only pin your own posts",
        )
    post.user_pinned = not post.user_pinned
    post.user_pinned_at = utcnow() if post.user_pinned else None
    db.commit()
    return PinResponse(id=post.id, user_pinned=post.user_pinned, admin_pinned=post.admin_pinned)


@router.post("/{post_id}/admin-pin", response_model=PinResponse)
async def toggle_admin_pin(
    post_id: int,
    current_user: ManagerDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> PinResponse:
    """Pin or unpin a post to the top of the feed.

    An admin pin also pins the post on its author's profile.
    """
    post = get_post_or_404(db, post_id)
    pinned = not post.admin_pinned
    pinned_at = utcnow() if pinned else None
    post.admin_pinned = pinned
    post.admin_pinned_at = pinned_at
    post.user_pinned = pinned
    post.user_pinned_at = pinned_at
    db.commit()
    logger.info("Profile %s set admin pin of post %s to %s", current_user.id, post.id, pinned)

    feed.publish("posts", "UPDATE", post.id)
    return PinResponse(id=post.id, user_pinned=post.user_pinned, admin_pinned=post.admin_pinned)


@router.post("/{post_id}/like", response_model=LikeResponse)
async def toggle_like(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> LikeResponse:
    """Like the post, or remove the like if it was already given."""
    post = get_post_or_404(db, post_id)
    liked = toggle_post_like(db, post, current_user.id)

    feed.publish("post_reactions", "INSERT" if liked else "DELETE", post.id)
    return LikeResponse(liked=liked, like_count=like_count(db, post.id))


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: int, db: SessionDep) -> list[Comment]:
    """List comments on a post, oldest first."""
    get_post_or_404(db, post_id)
    return (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> Comment:
    get_post_or_404(db, post_id)
    comment = Comment(post_id=post_id, user_id=current_user.id, content=payload.content)
    db.add(comment)
    db.commit()
    db.refresh(comment)

    feed.publish("comments", "INSERT", comment.id)
    return comment


@router.delete("/{post_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    post_id: int,
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> Response:
    """Delete one of the caller's own comments."""
    comment = db.get(Comment, comment_id)
    if comment is None or comment.post_id != post_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    if comment.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own comments",
        )
    db.delete(comment)
    db.commit()

    feed.publish("comments", "DELETE", comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/vote", response_model=PollResults)
async def vote(
    post_id: int,
    payload: PollVoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> PollResults:
    """Vote in a poll. Each member votes once per poll.

    Raises:
        HTTPException: 409 if the member already voted; 400 for an option
            outside this poll
    """
    post = get_post_or_404(db, post_id)
    try:
        cast_vote(db, post, payload.option_id, current_user.id)
    except DuplicateVoteError as err:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err)) from err
    except PollError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err

    feed.publish("poll_votes", "INSERT", post.id)
    return poll_results(db, post, current_user.id)


@router.get("/{post_id}/results", response_model=PollResults)
async def get_poll_results(
    post_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> PollResults:
    post = get_post_or_404(db, post_id)
    if post.post_type != "poll":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Post is not a poll")
    return poll_results(db, post, viewer.id if viewer else None)


def user_posts(db: Session, author: Profile) -> list[Post]:
    """Return an author's posts with their own pins first, then newest first."""
    return (
        db.query(Post)
        .filter(Post.user_id == author.id)
        .order_by(
            Post.user_pinned.desc(),
            Post.user_pinned_at.desc(),
            Post.created_at.desc(),
            Post.id.desc(),
        )
        .all()
    )
