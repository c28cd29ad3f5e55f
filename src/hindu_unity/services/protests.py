"""Protest responses and the per-viewer protest view."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from hindu_unity.models import Profile, Protest, ProtestResponse
from hindu_unity.models.profile import ROLE_MEMBER
from hindu_unity.schemas.common import AuthorSummary
from hindu_unity.schemas.protest import ProtestView, ResponseCounts
from hindu_unity.services.geocoding import maps_link
from hindu_unity.services.roles import effective_role


class ProtestResponseError(ValueError):
    """Raised when a member tries to change a response already given."""


def respond(db: Session, protest: Protest, profile: Profile, response_type: str) -> str | None:
    """Record `profile`'s response to `protest`.

    Repeating the current response withdraws it; choosing another one replaces
    it. Members cannot revisit a response once given.

    Returns:
        The response now on record, or None if it was withdrawn.

    Raises:
        ProtestResponseError: If a member has already responded.
    """
    existing = db.get(ProtestResponse, (protest.id, profile.id))
    if existing is not None and effective_role(profile) == ROLE_MEMBER:
        raise ProtestResponseError("You have already responded to this protest")

    if existing is not None and existing.response_type == response_type:
        db.delete(existing)
        db.commit()
        return None

    if existing is None:
        db.add(ProtestResponse(protest_id=protest.id, user_id=profile.id, response_type=response_type))
    else:
        existing.response_type = response_type
    db.commit()
    return response_type


def response_counts(db: Session, protest_id: int) -> ResponseCounts:
    """Aggregate responses per type for one protest."""
    rows = (
        db.query(ProtestResponse.response_type, func.count())
        .filter(ProtestResponse.protest_id == protest_id)
        .group_by(ProtestResponse.response_type)
        .all()
    )
    counts = dict(rows)
    return ResponseCounts(
        will_come=counts.get("will_come", 0),
        cant_come=counts.get("cant_come", 0),
        not_needed=counts.get("not_needed", 0),
        total=sum(counts.values()),
    )


def build_protest_view(db: Session, protest: Protest, viewer: Profile) -> ProtestView:
    """Return the protest as `viewer` may see it; members get no counts."""
    mine = db.get(ProtestResponse, (protest.id, viewer.id))
    counts = None
    if effective_role(viewer) != ROLE_MEMBER:
        counts = response_counts(db, protest.id)
    return ProtestView(
        id=protest.id,
        user_id=protest.user_id,
        reason=protest.reason,
        location=protest.location,
        location_lat=protest.location_lat,
        location_lng=protest.location_lng,
        created_at=protest.created_at,
        organizer=AuthorSummary.model_validate(protest.organizer),
        maps_link=maps_link(protest.location, protest.location_lat, protest.location_lng),
        my_response=mine.response_type if mine is not None else None,
        counts=counts,
    )
