"""Home feed schemas."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from .event import EventResponse
from .post import PostResponse


class FeedItem(BaseModel):
    """One entry in the merged feed; exactly one of `post` or `event` is set."""

    kind: Literal["post", "event"]
    post: PostResponse | None = None
    event: EventResponse | None = None


class FeedPage(BaseModel):
    items: list[FeedItem]
    next_cursor: str | None = None
