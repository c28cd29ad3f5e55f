"""Event endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Response, status

from hindu_unity.api.v1.dependencies import (
    ChangeFeedDep,
    CurrentUserDep,
    OrganizerDep,
    SessionDep,
)
from hindu_unity.db.time import utcnow
from hindu_unity.models import Event
from hindu_unity.models.profile import ROLE_SUPER_ADMIN
from hindu_unity.schemas.event import EventCreate, EventResponse
from hindu_unity.services.roles import effective_role

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/", response_model=list[EventResponse])
async def list_events(
    db: SessionDep,
    current_user: OrganizerDep,
    upcoming: bool = Query(False, description="Only events that have not happened yet"),
) -> list[Event]:
    """List events by date, soonest first."""
    query = db.query(Event)
    if upcoming:
        query = query.filter(Event.event_date >= utcnow())
    return query.order_by(Event.event_date.asc(), Event.id.asc()).all()


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int, db: SessionDep, current_user: CurrentUserDep) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    current_user: OrganizerDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> Event:
    """Schedule an event; open to volunteers and above."""
    event = Event(
        created_by=current_user.id,
        title=payload.title,
        description=(payload.description or "").strip() or None,
        event_type=payload.event_type,
        location=(payload.location or "").strip() or None,
        event_date=payload.event_date,
    )
    db.add(event)
    db.commit()
    db.refresh(event)

    feed.publish("events", "INSERT", event.id)
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    feed: ChangeFeedDep,
) -> Response:
    """Delete an event. Allowed for its creator and super admins."""
    event = db.get(Event, event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    if event.created_by != current_user.id and effective_role(current_user) != ROLE_SUPER_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete events you created",
        )
    db.delete(event)
    db.commit()

    feed.publish("events", "DELETE", event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
