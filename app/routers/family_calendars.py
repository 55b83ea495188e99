"""
Family calendars router - CRUD for shared iCal feeds.

A family calendar is a subscription to an external feed (school terms,
club fixtures, public holidays). Its events show up in the merged views
in the calendar's color, unassigned to any member.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_current_user
from app.models.family_calendar import FamilyCalendar
from app.models.user import User
from app.schemas.family_calendar import (
    FamilyCalendarCreate,
    FamilyCalendarOut,
    FamilyCalendarUpdate,
)


logger = logging.getLogger("familyhub.routers.family_calendars")


router = APIRouter(prefix="/family-calendars", tags=["family-calendars"])


def get_calendar_or_404(db: Session, calendar_id: str, family_id: str) -> FamilyCalendar:
    calendar = db.query(FamilyCalendar).filter(
        FamilyCalendar.id == calendar_id,
        FamilyCalendar.family_id == family_id,
    ).first()

    if not calendar:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Family calendar not found",
        )

    return calendar


@router.post("", response_model=FamilyCalendarOut, status_code=status.HTTP_201_CREATED)
def create_family_calendar(
    payload: FamilyCalendarCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Subscribe the family to a shared iCal feed."""
    calendar = FamilyCalendar(
        family_id=current_user.family_id,
        name=payload.name.strip(),
        ical_url=payload.ical_url.strip(),
        color=payload.color,
        hidden=payload.hidden,
    )
    db.add(calendar)
    db.commit()
    db.refresh(calendar)

    logger.info(f"Created family calendar {calendar.id}", extra={"family_id": current_user.family_id})
    return calendar


@router.get("", response_model=list[FamilyCalendarOut])
def list_family_calendars(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return (
        db.query(FamilyCalendar)
        .filter(FamilyCalendar.family_id == current_user.family_id)
        .order_by(FamilyCalendar.created_at)
        .all()
    )


@router.get("/{calendar_id}", response_model=FamilyCalendarOut)
def get_family_calendar(
    calendar_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_calendar_or_404(db, calendar_id, current_user.family_id)


@router.patch("/{calendar_id}", response_model=FamilyCalendarOut)
def update_family_calendar(
    calendar_id: str,
    payload: FamilyCalendarUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update a family calendar. Only provided fields are changed."""
    calendar = get_calendar_or_404(db, calendar_id, current_user.family_id)

    update_data = payload.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None:
            continue
        setattr(calendar, field, value.strip() if isinstance(value, str) else value)

    db.commit()
    db.refresh(calendar)
    return calendar


@router.delete("/{calendar_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_family_calendar(
    calendar_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    calendar = get_calendar_or_404(db, calendar_id, current_user.family_id)
    db.delete(calendar)
    db.commit()
    return None
