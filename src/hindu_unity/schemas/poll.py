"""Poll voting schemas."""
from __future__ import annotations

from pydantic import BaseModel


class PollVoteRequest(BaseModel):
    option_id: int


class PollOptionResult(BaseModel):
    id: int
    option_text: str
    position: int
    votes: int
    percentage: float


class PollResults(BaseModel):
    """Tally of a poll; `user_vote` is the viewer's chosen option, if any."""

    post_id: int
    options: list[PollOptionResult]
    total_votes: int
    user_vote: int | None = None
