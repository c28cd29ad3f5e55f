"""Administrative schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .profile import ProfileResponse


class AdminUserResponse(ProfileResponse):
    last_seen_at: datetime | None = None


class AdminStats(BaseModel):
    total_users: int
    total_posts: int
    posts_today: int


class DashboardStats(BaseModel):
    """Executive dashboard figures; `posts_today_by_type` is keyed by post type."""

    total_users: int
    live_users: int
    posts_today_by_type: dict[str, int]
    posts_today: int


class ImportedAccountResponse(BaseModel):
    user_id: int
    username: str
    claimed: bool
    full_name: str | None = None
    email: str | None = None

    model_config = ConfigDict(from_attributes=True)
