"""Protest endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.orm import Session

from hindu_unity.api.v1.dependencies import (
    ChangeFeedDep,
    CurrentUserDep,
    OrganizerDep,
    SessionDep,
)
from hindu_unity.models import Protest
from hindu_unity.schemas.protest import (
    ProtestCreate,
    ProtestRespond,
    ProtestView,
    RespondResult,
    ResponseCounts,
)
from hindu_unity.services.protests import (
    ProtestResponseError,
    build_protest_view,
    respond,
    response_counts,
)

router = APIRouter(prefix="/protests", tags=["protests"])


def _get_protest_or_404(db: Session, protest_id: int) -> Protest:
    protest = db.get(Protest, protest_id)
    if protest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Protest not found")
    return protest


@router.get("/", response_model=list[ProtestView])
async def list_protests(db: SessionDep, current_user: CurrentUserDep) -> list[ProtestView]:
    """List protests, newest first."""
    protests = db.query(Protest).order_by(Protest.created_at.desc(), Protest.id.desc()).all()
    return [build_protest_view(db, protest, current_user) for protest in protests]


@router.get("/{protest_id}", response_model=ProtestView)
async def get_protest(protest_id: int, db: SessionDep, current_user: CurrentUserDep) -> ProtestView:
    return build_protest_view(db, _get_protest_or_404(db, protest_id), current_user)


@router.post("/", response_model=ProtestView, status_code=status.HTTP_201_CREATED)
async def create_protest(
    payload: ProtestCreate,
    current_user: OrganizerDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> ProtestView:
    """Organize a protest at a picked location; open to volunteers and above."""
    protest = Protest(
        user_id=current_user.id,
        reason=payload.reason,
        location=payload.location,
        location_lat=payload.location_lat,
        location_lng=payload.location_lng,
    )
    db.add(protest)
    db.commit()
    db.refresh(protest)

    feed.publish("protests", "INSERT", protest.id)
    return build_protest_view(db, protest, current_user)


@router.post("/{protest_id}/respond", response_model=RespondResult)
async def respond_to_protest(
    protest_id: int,
    payload: ProtestRespond,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> RespondResult:
    """Answer a protest; sending the current answer again withdraws it.

    Raises:
        HTTPException: 409 when a member tries to change an answer
    """
    protest = _get_protest_or_404(db, protest_id)
    try:
        current = respond(db, protest, current_user, payload.response_type)
    except ProtestResponseError as err:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err)) from err
    return RespondResult(protest_id=protest.id, my_response=current)


@router.get("/{protest_id}/results", response_model=ResponseCounts)
async def get_organizer_results(
    protest_id: int,
    current_user: OrganizerDep,
    db: SessionDep,
) -> ResponseCounts:
    """Response counts for the protest's organizer."""
    protest = _get_protest_or_404(db, protest_id)
    if protest.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the organizer can view these results",
        )
    return response_counts(db, protest.id)
