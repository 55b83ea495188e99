"""
Events router - CRUD for the family's local events.

Local events are the only editable calendar source. After every committed
change a background task mirrors it to Google Calendar when the family
has a connection (see app/services/google_sync.py); sync problems never
affect the response.

Endpoints:
==========
- POST   /events            → create
- GET    /events            → list by ?date= or ?start=&end=
- GET    /events/{id}       → read
- PATCH  /events/{id}       → update
- DELETE /events/{id}       → delete
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db, get_session_factory
from app.deps import get_current_user
from app.models.event import Event
from app.models.user import User
from app.schemas.event import EventCreate, EventOut, EventUpdate
from app.services.google_sync import run_sync_create, run_sync_delete, run_sync_update
from app.services.time_grid import day_range


logger = logging.getLogger("familyhub.routers.events")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/events", tags=["events"])


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------

def get_event_or_404(db: Session, event_id: str, family_id: str) -> Event:
    """
    Get an event by id, ensuring it belongs to the family.

    Raises:
        404: If the event does not exist or belongs to another family
    """
    event = db.query(Event).filter(
        Event.id == event_id,
        Event.family_id == family_id,
    ).first()

    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )

    return event


# ---------------------------------------------------------------------------
# CREATE EVENT
# ---------------------------------------------------------------------------

@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session_factory=Depends(get_session_factory),
    current_user: User = Depends(get_current_user),
):
    """
    Create a local event.

    The rule comes from "repeat" when given, otherwise from "recurrence".
    """
    event = Event(
        family_id=current_user.family_id,
        title=payload.title.strip(),
        start_time=payload.start_time,
        end_time=payload.end_time,
        location=payload.location,
        notes=payload.notes,
        assignee_ids=payload.assignee_ids,
        recurrence=payload.resolved_recurrence(),
    )
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info(
        f"Created event {event.id}",
        extra={"family_id": current_user.family_id, "recurring": bool(event.recurrence)},
    )

    background_tasks.add_task(run_sync_create, session_factory, current_user.family_id, event.id)

    return event


# ---------------------------------------------------------------------------
# LIST EVENTS
# ---------------------------------------------------------------------------

@router.get("", response_model=List[EventOut])
def list_events(
    day: Optional[date] = Query(None, alias="date", description="Single day (YYYY-MM-DD)"),
    start: Optional[date] = Query(None, description="First day of range"),
    end: Optional[date] = Query(None, description="Last day of range (inclusive)"),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List local events overlapping a day or a date range.

    Without any filter the most recent events are returned (newest first).
    """
    query = db.query(Event).filter(Event.family_id == current_user.family_id)

    if day is not None:
        start, end = day, day

    if start is not None and end is not None:
        if end < start:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="end must not be before start",
            )
        range_start, range_end = day_range(start, end)
        return (
            query.filter(Event.start_time <= range_end, Event.end_time >= range_start)
            .order_by(Event.start_time)
            .all()
        )

    return query.order_by(Event.start_time.desc()).limit(limit).all()


# ---------------------------------------------------------------------------
# GET EVENT
# ---------------------------------------------------------------------------

@router.get("/{event_id}", response_model=EventOut)
def get_event(
    event_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get one local event."""
    return get_event_or_404(db, event_id, current_user.family_id)


# ---------------------------------------------------------------------------
# UPDATE EVENT
# ---------------------------------------------------------------------------

@router.patch("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session_factory=Depends(get_session_factory),
    current_user: User = Depends(get_current_user),
):
    """
    Update a local event. Only provided fields are changed.

    Raises:
        422: If the resulting end is not after the start
    """
    event = get_event_or_404(db, event_id, current_user.family_id)

    update_data = payload.model_dump(exclude_unset=True, exclude={"recurrence", "repeat"})
    for field, value in update_data.items():
        if value is None:
            continue
        setattr(event, field, value.strip() if field == "title" else value)

    recurrence = payload.resolved_recurrence()
    if recurrence is not None:
        event.recurrence = recurrence

    if event.end_time <= event.start_time:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_time must be after start_time",
        )

    db.commit()
    db.refresh(event)

    background_tasks.add_task(run_sync_update, session_factory, current_user.family_id, event.id)

    return event


# ---------------------------------------------------------------------------
# DELETE EVENT
# ---------------------------------------------------------------------------

@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session_factory=Depends(get_session_factory),
    current_user: User = Depends(get_current_user),
):
    """Delete a local event (and its Google copy, if mirrored)."""
    event = get_event_or_404(db, event_id, current_user.family_id)
    google_event_id = event.google_event_id

    db.delete(event)
    db.commit()

    if google_event_id:
        background_tasks.add_task(run_sync_delete, session_factory, current_user.family_id, google_event_id)

    return None
