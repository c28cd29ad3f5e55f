"""SQLAlchemy models for member profiles and their roles."""

from __future__ import annotations

from datetime import datetime
from typing import Final

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hindu_unity.db.session import Base
from hindu_unity.db.time import utcnow

ROLE_MEMBER: Final[str] = "member"
ROLE_VOLUNTEER: Final[str] = "volunteer"
ROLE_EXECUTIVE: Final[str] = "executive"
ROLE_SUPER_ADMIN: Final[str] = "super_admin"

ROLES: Final[tuple[str, ...]] = (
    ROLE_MEMBER,
    ROLE_VOLUNTEER,
    ROLE_EXECUTIVE,
    ROLE_SUPER_ADMIN,
)


class Profile(Base):
    """Account identity, credentials and role flags for a community member."""

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint(
            "role IN ('member', 'volunteer', 'executive', 'super_admin')",
            name="ck_profiles_role",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_MEMBER)
    # Executives require approval before gaining their privileges.
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_suspended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    last_seen_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def display_name(self) -> str:
        """Return the name shown next to content, falling back to a placeholder."""
        return self.full_name or "Anonymous"
