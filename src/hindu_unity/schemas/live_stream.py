"""Live stream schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LiveStreamCreate(BaseModel):
    title: str = Field(..., max_length=200)
    description: str | None = Field(None, max_length=2000)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please enter a stream title")
        return value


class LiveStreamResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None = None
    is_live: bool
    started_at: datetime
    ended_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class LiveStreamOwnerResponse(LiveStreamResponse):
    """Includes the stream key, which only the broadcaster ever sees."""

    stream_key: str
