"""Protest and RSVP schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .common import AuthorSummary

ResponseType = Literal["will_come", "cant_come", "not_needed"]


class ProtestCreate(BaseModel):
    """Schema for organizing a protest."""

    reason: str = Field(..., max_length=5000)
    location: str = Field(..., max_length=500)
    location_lat: float = Field(..., ge=-90, le=90)
    location_lng: float = Field(..., ge=-180, le=180)

    @field_validator("reason", "location")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("This field is required")
        return value


class ProtestRespond(BaseModel):
    response_type: ResponseType


class ResponseCounts(BaseModel):
    will_come: int = 0
    cant_come: int = 0
    not_needed: int = 0
    total: int = 0


class ProtestView(BaseModel):
    """A protest as seen by the viewer.

    `counts` is omitted for members, who only see their own response.
    """

    id: int
    user_id: int
    reason: str
    location: str
    location_lat: float | None = None
    location_lng: float | None = None
    created_at: datetime
    organizer: AuthorSummary
    maps_link: str
    my_response: ResponseType | None = None
    counts: ResponseCounts | None = None


class RespondResult(BaseModel):
    protest_id: int
    my_response: ResponseType | None = None
