"""Models for content and accounts imported by the external ingestion pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Final

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hindu_unity.db.session import Base
from hindu_unity.db.time import utcnow

PENDING_STATUS: Final[str] = "pending"
ACCEPTED_STATUS: Final[str] = "accepted"
REJECTED_STATUS: Final[str] = "rejected"


class PendingPost(Base):
    """Externally sourced post awaiting a moderator decision."""

    __tablename__ = "pending_posts"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="ck_pending_posts_status",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Identifier assigned by the source platform; ingestion is idempotent on it.
    external_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    external_username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_type: Mapped[str] = mapped_column(String(10), nullable=False, default="text")
    media_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str | None] = mapped_column(String(50), nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    link_preview: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default=PENDING_STATUS)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class ImportedAccount(Base):
    """Maps a profile created by the importer to its source-platform handle."""

    __tablename__ = "imported_accounts"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    username: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    claimed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
