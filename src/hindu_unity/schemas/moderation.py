"""Schemas for the external content ingestion queue."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PendingPostIngest(BaseModel):
    """Payload pushed by the ingestion pipeline."""

    external_id: str = Field(..., min_length=1, max_length=100)
    user_id: int
    external_username: str | None = Field(None, max_length=100)
    content: str | None = Field(None, max_length=5000)
    post_type: Literal["text", "image", "video"] = "text"
    media_url: str | None = Field(None, max_length=2048)
    source: str | None = Field(None, max_length=50)
    location: str | None = Field(None, max_length=500)
    link_preview: dict[str, Any] | None = None


class PendingPostResponse(BaseModel):
    id: int
    external_id: str
    user_id: int
    external_username: str | None = None
    content: str | None = None
    post_type: str
    media_url: str | None = None
    source: str | None = None
    location: str | None = None
    link_preview: dict[str, Any] | None = None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AcceptResult(BaseModel):
    pending_post_id: int
    post_id: int
