"""
Calendar Store - the storage queries the event aggregator depends on.

The aggregator talks to this interface instead of the ORM so it can be
exercised with in-memory fakes. SqlCalendarStore is the production
implementation over a SQLAlchemy session. Its queries run inline on the
request's session; only the feed fetches overlap in the aggregator's fan-out.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.event import Event
from app.models.family_calendar import FamilyCalendar
from app.models.family_member import FamilyMember
from app.models.meal_plan import MealPlan


class CalendarStore(ABC):
    """Read access to one family's calendar data."""

    @abstractmethod
    async def list_events(self, family_id: str, range_start: datetime, range_end: datetime) -> List[Event]:
        """Local events with start_time <= range_end and end_time >= range_start."""
        pass

    @abstractmethod
    async def list_feed_members(self, family_id: str) -> List[FamilyMember]:
        """Visible members that have an iCal feed configured."""
        pass

    @abstractmethod
    async def list_feed_calendars(self, family_id: str) -> List[FamilyCalendar]:
        """Visible family calendars that have an iCal feed configured."""
        pass

    @abstractmethod
    async def list_meal_plans(self, family_id: str, first_day: date, last_day: date) -> List[MealPlan]:
        """Meal plans dated first_day..last_day inclusive."""
        pass


class SqlCalendarStore(CalendarStore):
    """CalendarStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    async def list_events(self, family_id: str, range_start: datetime, range_end: datetime) -> List[Event]:
        stmt = (
            select(Event)
            .where(
                Event.family_id == family_id,
                Event.start_time <= range_end,
                Event.end_time >= range_start,
            )
            .order_by(Event.start_time)
        )
        return list(self.db.execute(stmt).scalars().all())

    async def list_feed_members(self, family_id: str) -> List[FamilyMember]:
        stmt = (
            select(FamilyMember)
            .where(FamilyMember.family_id == family_id, FamilyMember.hidden.is_(False))
            .order_by(FamilyMember.created_at)
        )
        members = self.db.execute(stmt).scalars().all()
        return [member for member in members if member.has_feed()]

    async def list_feed_calendars(self, family_id: str) -> List[FamilyCalendar]:
        stmt = (
            select(FamilyCalendar)
            .where(FamilyCalendar.family_id == family_id, FamilyCalendar.hidden.is_(False))
            .order_by(FamilyCalendar.created_at)
        )
        calendars = self.db.execute(stmt).scalars().all()
        return [calendar for calendar in calendars if calendar.has_feed()]

    async def list_meal_plans(self, family_id: str, first_day: date, last_day: date) -> List[MealPlan]:
        stmt = (
            select(MealPlan)
            .where(
                MealPlan.family_id == family_id,
                MealPlan.date >= first_day,
                MealPlan.date <= last_day,
            )
            .order_by(MealPlan.date)
        )
        return list(self.db.execute(stmt).scalars().all())
