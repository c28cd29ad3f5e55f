"""SQLAlchemy models for posts and the interactions attached to them."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Final

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hindu_unity.db.session import Base
from hindu_unity.db.time import utcnow

from .profile import Profile

POST_TYPES: Final[tuple[str, ...]] = ("text", "image", "video", "poll", "live")
REACTION_LIKE: Final[str] = "like"


class Post(Base):
    """Primary content entity shown in the community feed."""

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint(
            "post_type IN ('text', 'image', 'video', 'poll', 'live')",
            name="ck_posts_post_type",
        ),
        Index("ix_posts_created_at_id", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_type: Mapped[str] = mapped_column(String(10), nullable=False, default="text")
    media_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    media_urls: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_lng: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Owner pin shows first on the author's profile; admin pin also surfaces in the feed.
    user_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    user_pinned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    admin_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    admin_pinned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Provenance for content published from the ingestion queue.
    source: Mapped[str | None] = mapped_column(String(50), nullable=True)
    external_id: Mapped[str | None] = mapped_column(String(100), nullable=True, unique=True)
    external_username: Mapped[str | None] = mapped_column(String(100), nullable=True)
    link_preview: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[Profile] = relationship("Profile", lazy="joined")
    poll_options: Mapped[list[PollOption]] = relationship(
        "PollOption",
        cascade="all, delete-orphan",
        order_by="PollOption.position",
        back_populates="post",
    )


class PollOption(Base):
    """One selectable answer of a poll post."""

    __tablename__ = "poll_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    option_text: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    post: Mapped[Post] = relationship("Post", back_populates="poll_options")


class PollVote(Base):
    """A member's single vote in a poll."""

    __tablename__ = "poll_votes"
    __table_args__ = (
        # One vote per user per poll, whichever option they picked.
        UniqueConstraint("post_id", "user_id", name="uq_poll_votes_post_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    poll_option_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("poll_options.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Comment(Base):
    """Flat comment attached to a post."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[Profile] = relationship("Profile", lazy="joined")


class PostReaction(Base):
    """Reaction (currently only likes) left by a member on a post."""

    __tablename__ = "post_reactions"
    __table_args__ = (
        UniqueConstraint(
            "post_id", "user_id", "reaction_type", name="uq_post_reactions_post_user_type"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    reaction_type: Mapped[str] = mapped_column(String(20), nullable=False, default=REACTION_LIKE)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
