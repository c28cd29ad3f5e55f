"""Profile and follow-graph schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProfileResponse(BaseModel):
    """The signed-in member's own profile."""

    id: int
    email: str
    full_name: str | None = None
    role: str
    is_approved: bool
    is_suspended: bool
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicProfileResponse(BaseModel):
    """Another member's profile as seen by the viewer."""

    id: int
    full_name: str | None = None
    role: str
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    follower_count: int = 0
    following_count: int = 0
    is_following: bool = False


class ProfileUpdate(BaseModel):
    """Editable profile fields; omitted fields are left unchanged."""

    full_name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=500)


class AvatarUpdate(BaseModel):
    avatar_url: str = Field(..., min_length=1, max_length=2048)


class Capabilities(BaseModel):
    """Navigation flags derived from the member's role."""

    role: str
    can_view_events: bool
    can_organize: bool
    can_manage_users: bool
    can_view_dashboard: bool
    can_view_admin: bool
    can_review_pending_posts: bool
    pending_approval: bool


class ClaimStatus(BaseModel):
    user_id: int
    imported: bool
    claimed: bool
    username: str | None = None
