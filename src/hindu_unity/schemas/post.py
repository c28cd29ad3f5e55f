"""Post-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import AuthorSummary
from .poll import PollResults

PostType = Literal["text", "image", "video", "poll", "live"]


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    content: str | None = Field(None, max_length=5000, description="Post body")
    post_type: PostType = "text"
    media_url: str | None = Field(None, max_length=2048)
    media_urls: list[str] | None = Field(None, max_length=10)
    location: str | None = Field(None, max_length=500)
    location_lat: float | None = Field(None, ge=-90, le=90)
    location_lng: float | None = Field(None, ge=-180, le=180)
    poll_options: list[str] | None = Field(None, description="Answers for poll posts")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    user_id: int
    content: str | None = None
    post_type: str
    media_url: str | None = None
    media_urls: list[str] | None = None
    location: str | None = None
    location_lat: float | None = None
    location_lng: float | None = None
    user_pinned: bool = False
    admin_pinned: bool = False
    source: str | None = None
    external_username: str | None = None
    link_preview: dict[str, Any] | None = None
    created_at: datetime
    author: AuthorSummary
    like_count: int = 0
    comment_count: int = 0
    liked_by_me: bool = False
    poll: PollResults | None = None

    model_config = ConfigDict(from_attributes=True)


class LikeResponse(BaseModel):
    liked: bool
    like_count: int


class PinResponse(BaseModel):
    id: int
    user_pinned: bool
    admin_pinned: bool
