"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """Plain acknowledgement returned by endpoints without a richer payload."""

    message: str = Field(..., description="Human-readable outcome.")


class AuthorSummary(BaseModel):
    """Compact profile shown next to posts, comments and follow lists."""

    id: int
    full_name: str | None = None
    avatar_url: str | None = None
    role: str

    model_config = ConfigDict(from_attributes=True)
