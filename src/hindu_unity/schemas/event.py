"""Event schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import AuthorSummary


class EventCreate(BaseModel):
    """Schema for scheduling a new event."""

    title: str = Field(..., max_length=200)
    description: str | None = Field(None, max_length=5000)
    event_type: Literal["event", "meeting", "rally", "workshop", "other"] = "event"
    location: str | None = Field(None, max_length=500)
    event_date: datetime

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


class EventResponse(BaseModel):
    id: int
    created_by: int
    title: str
    description: str | None = None
    event_type: str
    location: str | None = None
    event_date: datetime
    created_at: datetime
    creator: AuthorSummary

    model_config = ConfigDict(from_attributes=True)
