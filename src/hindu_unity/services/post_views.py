"""Build API views of posts with their engagement counts."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from hindu_unity.models import Comment, Post, PostReaction
from hindu_unity.models.post import REACTION_LIKE
from hindu_unity.schemas.common import AuthorSummary
from hindu_unity.schemas.post import PostResponse
from hindu_unity.services.polls import poll_results


def like_count(db: Session, post_id: int) -> int:
    return (
        db.query(func.count(PostReaction.id))
        .filter(PostReaction.post_id == post_id, PostReaction.reaction_type == REACTION_LIKE)
        .scalar()
        or 0
    )


def build_post_views(
    db: Session,
    posts: Iterable[Post],
    viewer_id: int | None = None,
) -> list[PostResponse]:
    """Return response models for `posts`, preserving their order.

    Like and comment counts are fetched with one grouped query each rather
    than per post.
    """
    posts = list(posts)
    if not posts:
        return []
    post_ids = [post.id for post in posts]

    likes = dict(
        db.query(PostReaction.post_id, func.count(PostReaction.id))
        .filter(PostReaction.post_id.in_(post_ids), PostReaction.reaction_type == REACTION_LIKE)
        .group_by(PostReaction.post_id)
        .all()
    )
    comments = dict(
        db.query(Comment.post_id, func.count(Comment.id))
        .filter(Comment.post_id.in_(post_ids))
        .group_by(Comment.post_id)
        .all()
    )
    liked: set[int] = set()
    if viewer_id is not None:
        liked = {
            post_id
            for (post_id,) in db.query(PostReaction.post_id).filter(
                PostReaction.post_id.in_(post_ids),
                PostReaction.user_id == viewer_id,
                PostReaction.reaction_type == REACTION_LIKE,
            )
        }

    views = []
    for post in posts:
        views.append(
            PostResponse(
                id=post.id,
                user_id=post.user_id,
                content=post.content,
                post_type=post.post_type,
                media_url=post.media_url,
                media_urls=post.media_urls,
                location=post.location,
                location_lat=post.location_lat,
                location_lng=post.location_lng,
                user_pinned=post.user_pinned,
                admin_pinned=post.admin_pinned,
                source=post.source,
                external_username=post.external_username,
                link_preview=post.link_preview,
                created_at=post.created_at,
                author=AuthorSummary.model_validate(post.author),
                like_count=likes.get(post.id, 0),
                comment_count=comments.get(post.id, 0),
                liked_by_me=post.id in liked,
                poll=poll_results(db, post, viewer_id) if post.post_type == "poll" else None,
            )
        )
    return views


def build_post_view(db: Session, post: Post, viewer_id: int | None = None) -> PostResponse:
    return build_post_views(db, [post], viewer_id)[0]
