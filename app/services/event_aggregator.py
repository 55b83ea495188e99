"""
Event Aggregator - merges every calendar source of a family into one
time-ordered list for a date range.

Sources:
- Local events stored in the database (source="local")
- Each visible member's personal iCal feed (source="ical")
- Each visible family calendar's iCal feed (source="family-ical")
- Meal plans shown as pseudo-events (source="meal")

All sources are loaded concurrently and the fan-out is settle-all: a
source that fails (feed down, timeout, query error) is logged and
contributes no events, while the others are still returned. A partially
filled calendar on the kitchen display beats an empty one.

Remote feed events are not expanded for RRULEs; only the published
DTSTART/DTEND instance is shown.

Usage:
    aggregator = EventAggregator(SqlCalendarStore(db), get_ical_cache())
    events = await aggregator.aggregate(family_id, range_start, range_end)
"""

import asyncio
import logging
from datetime import datetime, tzinfo
from typing import List, Optional

from app.models.event import Event
from app.models.family_calendar import FamilyCalendar
from app.models.family_member import FamilyMember
from app.schemas.event import CalendarEvent, EventSource, ensure_utc
from app.services.calendar_store import CalendarStore
from app.services.ical_cache import ICalFetchCache
from app.services.ical_parser import ParsedVEvent, parse_ical
from app.services.meal_events import meal_plans_to_events


logger = logging.getLogger("familyhub.services.event_aggregator")


def local_event_to_calendar_event(event: Event) -> CalendarEvent:
    """Convert a stored Event row into the unified form."""
    return CalendarEvent(
        id=event.id,
        title=event.title,
        start_time=event.start_time,
        end_time=event.end_time,
        location=event.location or "",
        notes=event.notes or "",
        assignee_ids=list(event.assignee_ids or []),
        recurrence=event.recurrence or None,
        source=EventSource.LOCAL,
    )


def _vevent_to_calendar_event(
    vevent: ParsedVEvent,
    event_id: str,
    source: EventSource,
    assignee_ids: List[str],
    color: Optional[str] = None,
) -> CalendarEvent:
    return CalendarEvent(
        id=event_id,
        title=vevent.summary,
        start_time=vevent.dtstart,
        end_time=vevent.dtend,
        location=vevent.location,
        notes=vevent.description,
        assignee_ids=assignee_ids,
        source=source,
        color=color,
    )


class EventAggregator:
    """
    Builds the merged event list for one family.

    Args:
        store: Storage queries (SqlCalendarStore in production)
        ical_cache: Shared feed cache
        tz: Zone for meal plan times (host local when None)
    """

    def __init__(self, store: CalendarStore, ical_cache: ICalFetchCache, tz: Optional[tzinfo] = None):
        self.store = store
        self.ical_cache = ical_cache
        self.tz = tz

    # -----------------------------------------------------------------------
    # PER-SOURCE LOADERS
    # -----------------------------------------------------------------------

    async def _load_local(self, family_id: str, range_start: datetime, range_end: datetime) -> List[CalendarEvent]:
        rows = await self.store.list_events(family_id, range_start, range_end)
        return [local_event_to_calendar_event(row) for row in rows]

    async def _load_feed(self, url: str, range_start: datetime, range_end: datetime) -> List[ParsedVEvent]:
        text = await self.ical_cache.fetch(url)
        return [
            vevent for vevent in parse_ical(text)
            if vevent.dtstart < range_end and vevent.dtend > range_start
        ]

    async def _load_member_feed(
        self, member: FamilyMember, range_start: datetime, range_end: datetime
    ) -> List[CalendarEvent]:
        vevents = await self._load_feed(member.ical_url.strip(), range_start, range_end)
        return [
            _vevent_to_calendar_event(
                vevent,
                event_id=f"ical-{member.id}-{vevent.uid}",
                source=EventSource.ICAL,
                assignee_ids=[member.id],
            )
            for vevent in vevents
        ]

    async def _load_family_feed(
        self, calendar: FamilyCalendar, range_start: datetime, range_end: datetime
    ) -> List[CalendarEvent]:
        vevents = await self._load_feed(calendar.ical_url.strip(), range_start, range_end)
        return [
            _vevent_to_calendar_event(
                vevent,
                event_id=f"family-ical-{calendar.id}-{vevent.uid}",
                source=EventSource.FAMILY_ICAL,
                assignee_ids=[],
                color=calendar.color,
            )
            for vevent in vevents
        ]

    async def _load_meals(self, family_id: str, range_start: datetime, range_end: datetime) -> List[CalendarEvent]:
        # Meal dates are local calendar days
        first_day = range_start.astimezone(self.tz).date()
        last_day = range_end.astimezone(self.tz).date()
        plans = await self.store.list_meal_plans(family_id, first_day, last_day)
        return [
            event for event in meal_plans_to_events(plans, self.tz)
            if event.start_time <= range_end and event.end_time >= range_start
        ]

    # -----------------------------------------------------------------------
    # AGGREGATION
    # -----------------------------------------------------------------------

    async def aggregate(self, family_id: str, range_start: datetime, range_end: datetime) -> List[CalendarEvent]:
        """
        Load and merge all sources for [range_start, range_end].

        Never raises for a failing source; such sources contribute nothing.

        Returns:
            Events sorted by start_time (stable for equal starts)
        """
        range_start = ensure_utc(range_start)
        range_end = ensure_utc(range_end)

        members: List[FamilyMember] = []
        calendars: List[FamilyCalendar] = []
        try:
            members = await self.store.list_feed_members(family_id)
            calendars = await self.store.list_feed_calendars(family_id)
        except Exception as e:
            logger.warning(
                f"Could not load feed sources: {e}",
                extra={"family_id": family_id},
            )

        labels = ["local"]
        tasks = [self._load_local(family_id, range_start, range_end)]

        for member in members:
            labels.append(f"member:{member.id}")
            tasks.append(self._load_member_feed(member, range_start, range_end))

        for calendar in calendars:
            labels.append(f"calendar:{calendar.id}")
            tasks.append(self._load_family_feed(calendar, range_start, range_end))

        labels.append("meals")
        tasks.append(self._load_meals(family_id, range_start, range_end))

        results = await asyncio.gather(*tasks, return_exceptions=True)

        merged: List[CalendarEvent] = []
        failed = 0
        for label, result in zip(labels, results):
            if isinstance(result, BaseException):
                failed += 1
                logger.warning(
                    f"Calendar source {label} failed: {result}",
                    extra={"family_id": family_id, "source": label},
                )
                continue
            merged.extend(result)

        merged.sort(key=lambda event: event.start_time)

        logger.info(
            f"Aggregated {len(merged)} events from {len(tasks) - failed}/{len(tasks)} sources",
            extra={"family_id": family_id},
        )
        return merged
