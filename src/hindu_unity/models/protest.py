"""Models for protests and the RSVP-style responses to them."""

from __future__ import annotations

from datetime import datetime
from typing import Final

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hindu_unity.db.session import Base
from hindu_unity.db.time import utcnow

from .profile import Profile

RESPONSE_WILL_COME: Final[str] = "will_come"
RESPONSE_CANT_COME: Final[str] = "cant_come"
RESPONSE_NOT_NEEDED: Final[str] = "not_needed"
RESPONSE_TYPES: Final[tuple[str, ...]] = (
    RESPONSE_WILL_COME,
    RESPONSE_CANT_COME,
    RESPONSE_NOT_NEEDED,
)


class Protest(Base):
    """A call to protest at a specific place."""

    __tablename__ = "protests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    organizer: Mapped[Profile] = relationship("Profile", lazy="joined")


class ProtestResponse(Base):
    """Per-user answer to a protest; at most one per user."""

    __tablename__ = "protest_responses"
    __table_args__ = (
        CheckConstraint(
            "response_type IN ('will_come', 'cant_come', 'not_needed')",
            name="ck_protest_responses_type",
        ),
    )

    protest_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("protests.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    response_type: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
