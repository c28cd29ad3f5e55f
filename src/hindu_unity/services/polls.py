"""Poll voting and result tallies."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hindu_unity.models import PollOption, PollVote, Post
from hindu_unity.schemas.poll import PollOptionResult, PollResults

logger = logging.getLogger(__name__)

MIN_POLL_OPTIONS = 2
MAX_POLL_OPTIONS = 4
ALREADY_VOTED = "You've already voted in this poll"


class PollError(ValueError):
    """Raised when a vote cannot be recorded."""


class DuplicateVoteError(PollError):
    """Raised when the member has already voted in the poll."""


def clean_poll_options(options: list[str] | None) -> list[str]:
    """Trim options and drop blanks, enforcing the 2 to 4 option range.

    Raises:
        PollError: If fewer than two or more than four options remain.
    """
    cleaned = [option.strip() for option in options or [] if option and option.strip()]
    if len(cleaned) < MIN_POLL_OPTIONS:
        raise PollError("Please add at least 2 poll options")
    if len(cleaned) > MAX_POLL_OPTIONS:
        raise PollError("A poll can have at most 4 options")
    return cleaned


def cast_vote(db: Session, post: Post, option_id: int, user_id: int) -> PollVote:
    """Record `user_id`'s vote for `option_id` in the poll `post`.

    Raises:
        PollError: If the post is not a poll or the option belongs elsewhere.
        DuplicateVoteError: If the member already voted in this poll.
    """
    if post.post_type != "poll":
        raise PollError("Post is not a poll")
    option = (
        db.query(PollOption)
        .filter(PollOption.id == option_id, PollOption.post_id == post.id)
        .first()
    )
    if option is None:
        raise PollError("Poll option not found")

    existing = (
        db.query(PollVote.id)
        .filter(PollVote.post_id == post.id, PollVote.user_id == user_id)
        .first()
    )
    if existing is not None:
        raise DuplicateVoteError(ALREADY_VOTED)

    vote = PollVote(post_id=post.id, poll_option_id=option.id, user_id=user_id)
    try:
        # Concurrent double submits are settled by the unique constraint.
        with db.begin_nested():
            db.add(vote)
    except IntegrityError as err:
        logger.info("Duplicate poll vote rejected for post %s user %s", post.id, user_id)
        raise DuplicateVoteError(ALREADY_VOTED) from err
    db.commit()
    return vote


def poll_results(db: Session, post: Post, viewer_id: int | None = None) -> PollResults:
    """Aggregate vote counts per option for a poll post."""
    counts = dict(
        db.query(PollVote.poll_option_id, func.count(PollVote.id))
        .filter(PollVote.post_id == post.id)
        .group_by(PollVote.poll_option_id)
        .all()
    )
    total = sum(counts.values())

    user_vote = None
    if viewer_id is not None:
        user_vote = (
            db.query(PollVote.poll_option_id)
            .filter(PollVote.post_id == post.id, PollVote.user_id == viewer_id)
            .scalar()
        )

    options = [
        PollOptionResult(
            id=option.id,
            option_text=option.option_text,
            position=option.position,
            votes=counts.get(option.id, 0),
            percentage=round(counts.get(option.id, 0) * 100 / total, 1) if total else 0.0,
        )
        for option in post.poll_options
    ]
    return PollResults(post_id=post.id, options=options, total_votes=total, user_vote=user_vote)
