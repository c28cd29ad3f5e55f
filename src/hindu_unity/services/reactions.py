"""Like toggling on posts."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hindu_unity.models import Post, PostReaction
from hindu_unity.models.post import REACTION_LIKE

logger = logging.getLogger(__name__)


def _find_like(db: Session, post_id: int, user_id: int) -> PostReaction | None:
    return (
        db.query(PostReaction)
        .filter(
            PostReaction.post_id == post_id,
            PostReaction.user_id == user_id,
            PostReaction.reaction_type == REACTION_LIKE,
        )
        .first()
    )


def toggle_post_like(db: Session, post: Post, user_id: int) -> bool:
    """Add `user_id`'s like to `post`, or remove it if present.

    Returns:
        True if the post is liked by the user afterwards.
    """
    reaction = _find_like(db, post.id, user_id)
    if reaction is not None:
        db.delete(reaction)
        db.commit()
        return False

    try:
        # A concurrent like from the same user wins the unique constraint.
        with db.begin_nested():
            db.add(PostReaction(post_id=post.id, user_id=user_id, reaction_type=REACTION_LIKE))
    except IntegrityError:
        logger.info("Duplicate like ignored for post %s user %s", post.id, user_id)
    db.commit()
    return True
