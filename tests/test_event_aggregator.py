"""
Tests for the event aggregator.

These tests verify:
- All sources (local, member feeds, family feeds, meals) are merged
- Source-namespaced ids, assignees and colors
- Remote events are filtered to the requested range
- A failing source is skipped without failing the whole result
- The merged list is sorted by start time
"""

from datetime import date, datetime, timezone
from typing import List

import httpx
import pytest

from app.models.event import Event
from app.models.family_calendar import FamilyCalendar
from app.models.family_member import FamilyMember
from app.models.meal_plan import MealPlan
from app.schemas.event import EventSource
from app.services.calendar_store import CalendarStore
from app.services.event_aggregator import EventAggregator, local_event_to_calendar_event
from app.services.ical_cache import ICalFetchCache


UTC = timezone.utc
FAMILY_ID = "fam-1"


def _ics(*vevents: str) -> str:
    return "BEGIN:VCALENDAR\r\n" + "".join(vevents) + "END:VCALENDAR\r\n"


def _vevent(uid: str, dtstart: str, dtend: str, summary: str = "Event") -> str:
    return f"BEGIN:VEVENT\r\nUID:{uid}\r\nSUMMARY:{summary}\r\nDTSTART:{dtstart}\r\nDTEND:{dtend}\r\nEND:VEVENT\r\n"


class FakeStore(CalendarStore):
    """In-memory CalendarStore; set fail_* to make a query raise."""

    def __init__(self, events=None, members=None, calendars=None, meal_plans=None):
        self.events: List[Event] = events or []
        self.members: List[FamilyMember] = members or []
        self.calendars: List[FamilyCalendar] = calendars or []
        self.meal_plans: List[MealPlan] = meal_plans or []
        self.fail_events = False
        self.fail_members = False

    async def list_events(self, family_id, range_start, range_end):
        if self.fail_events:
            raise RuntimeError("database unavailable")
        return [e for e in self.events if e.start_time <= range_end and e.end_time >= range_start]

    async def list_feed_members(self, family_id):
        if self.fail_members:
            raise RuntimeError("database unavailable")
        return [m for m in self.members if not m.hidden and m.has_feed()]

    async def list_feed_calendars(self, family_id):
        return [c for c in self.calendars if not c.hidden and c.has_feed()]

    async def list_meal_plans(self, family_id, first_day, last_day):
        return [p for p in self.meal_plans if first_day <= p.date <= last_day]


def _member(member_id: str, url: str, hidden: bool = False) -> FamilyMember:
    return FamilyMember(id=member_id, family_id=FAMILY_ID, name=member_id, ical_url=url, hidden=hidden)


def _local(event_id: str, start: datetime, end: datetime) -> Event:
    return Event(
        id=event_id,
        family_id=FAMILY_ID,
        title=event_id,
        start_time=start,
        end_time=end,
        location="",
        notes="",
        assignee_ids=[],
        recurrence="",
    )


@pytest.fixture
def feeds() -> dict:
    return {}


@pytest.fixture
def cache(feeds, feed_transport) -> ICalFetchCache:
    return ICalFetchCache(transport=feed_transport(feeds))


def _range(first: int, last: int):
    return datetime(2024, 3, first, tzinfo=UTC), datetime(2024, 3, last, 23, 59, 59, tzinfo=UTC)


# ---------------------------------------------------------------------------
# CONVERSION
# ---------------------------------------------------------------------------

class TestLocalEventConversion:

    def test_empty_recurrence_becomes_none(self):
        event = local_event_to_calendar_event(_local("e1", datetime(2024, 3, 11, 9, tzinfo=UTC), datetime(2024, 3, 11, 10, tzinfo=UTC)))
        assert event.recurrence is None
        assert event.source == EventSource.LOCAL
        assert event.id == "e1"

    def test_recurrence_is_kept(self):
        row = _local("e1", datetime(2024, 3, 11, 9, tzinfo=UTC), datetime(2024, 3, 11, 10, tzinfo=UTC))
        row.recurrence = "FREQ=WEEKLY;INTERVAL=1;BYDAY=MO"
        assert local_event_to_calendar_event(row).recurrence == "FREQ=WEEKLY;INTERVAL=1;BYDAY=MO"


# ---------------------------------------------------------------------------
# AGGREGATION
# ---------------------------------------------------------------------------

class TestAggregate:

    @pytest.mark.asyncio
    async def test_merges_all_sources(self, feeds, cache):
        feeds["https://feeds.example/mia.ics"] = _ics(
            _vevent("school-1", "20240311T080000Z", "20240311T150000Z", "School"),
        )
        feeds["https://feeds.example/holidays.ics"] = _ics(
            _vevent("bank-hol", "20240312", "20240313", "Holiday"),
        )
        store = FakeStore(
            events=[_local("local-1", datetime(2024, 3, 11, 17, tzinfo=UTC), datetime(2024, 3, 11, 18, tzinfo=UTC))],
            members=[_member("mia", "https://feeds.example/mia.ics")],
            calendars=[FamilyCalendar(
                id="cal-1", family_id=FAMILY_ID, name="Holidays",
                ical_url="https://feeds.example/holidays.ics", color="#10B981", hidden=False,
            )],
            meal_plans=[MealPlan(
                id="meal-row", family_id=FAMILY_ID, date=date(2024, 3, 11),
                meal_type="dinner", food_name="Tacos", notes="", assignee_ids=[],
            )],
        )

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(11, 12))

        by_id = {event.id: event for event in events}
        assert set(by_id) == {
            "local-1",
            "ical-mia-school-1",
            "family-ical-cal-1-bank-hol",
            "meal-meal-row",
        }
        assert by_id["ical-mia-school-1"].assignee_ids == ["mia"]
        assert by_id["ical-mia-school-1"].source == EventSource.ICAL
        assert by_id["family-ical-cal-1-bank-hol"].assignee_ids == []
        assert by_id["family-ical-cal-1-bank-hol"].color == "#10B981"
        assert by_id["meal-meal-row"].title == "Dinner: Tacos"

    @pytest.mark.asyncio
    async def test_sorted_by_start_time(self, feeds, cache):
        feeds["https://feeds.example/a.ics"] = _ics(
            _vevent("late", "20240311T160000Z", "20240311T170000Z"),
            _vevent("early", "20240311T070000Z", "20240311T080000Z"),
        )
        store = FakeStore(
            events=[_local("middle", datetime(2024, 3, 11, 12, tzinfo=UTC), datetime(2024, 3, 11, 13, tzinfo=UTC))],
            members=[_member("m1", "https://feeds.example/a.ics")],
        )

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(11, 11))

        assert [event.id for event in events] == ["ical-m1-early", "middle", "ical-m1-late"]

    @pytest.mark.asyncio
    async def test_multi_day_feed_event_overlapping_range_is_included(self, feeds, cache):
        feeds["https://feeds.example/a.ics"] = _ics(_vevent("camp", "20240310", "20240312"))
        store = FakeStore(members=[_member("m1", "https://feeds.example/a.ics")])

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(11, 20))

        assert [event.id for event in events] == ["ical-m1-camp"]

    @pytest.mark.asyncio
    async def test_feed_event_before_range_is_excluded(self, feeds, cache):
        feeds["https://feeds.example/a.ics"] = _ics(_vevent("camp", "20240310", "20240312"))
        store = FakeStore(members=[_member("m1", "https://feeds.example/a.ics")])

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(13, 20))

        assert events == []

    @pytest.mark.asyncio
    async def test_failing_feed_is_skipped(self, feeds, cache):
        feeds["https://feeds.example/a.ics"] = _ics(_vevent("a1", "20240311T090000Z", "20240311T100000Z"))
        feeds["https://feeds.example/b.ics"] = _ics(_vevent("b1", "20240311T110000Z", "20240311T120000Z"))
        store = FakeStore(members=[
            _member("a", "https://feeds.example/a.ics"),
            _member("b", "https://feeds.example/b.ics"),
            _member("c", "https://feeds.example/missing.ics"),
        ])

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(11, 11))

        assert [event.id for event in events] == ["ical-a-a1", "ical-b-b1"]

    @pytest.mark.asyncio
    async def test_timed_out_feed_keeps_other_sources(self):
        feeds = {
            "https://feeds.example/a.ics": _ics(_vevent("a1", "20240311T090000Z", "20240311T100000Z")),
            "https://feeds.example/b.ics": _ics(_vevent("b1", "20240311T110000Z", "20240311T120000Z")),
        }

        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            if url not in feeds:
                raise httpx.ReadTimeout("feed did not answer", request=request)
            return httpx.Response(200, text=feeds[url])

        cache = ICalFetchCache(transport=httpx.MockTransport(handler))
        store = FakeStore(
            events=[_local("local-1", datetime(2024, 3, 11, 8, tzinfo=UTC), datetime(2024, 3, 11, 9, tzinfo=UTC))],
            members=[
                _member("a", "https://feeds.example/a.ics"),
                _member("b", "https://feeds.example/b.ics"),
                _member("slow", "https://feeds.example/slow.ics"),
            ],
            meal_plans=[
                MealPlan(id="lunch", family_id=FAMILY_ID, date=date(2024, 3, 11), meal_type="lunch",
                         food_name="Soup", notes="", assignee_ids=[]),
            ],
        )

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(11, 11))

        assert [event.id for event in events] == ["local-1", "ical-a-a1", "ical-b-b1", "meal-lunch"]

    @pytest.mark.asyncio
    async def test_failing_local_query_keeps_feeds(self, feeds, cache):
        feeds["https://feeds.example/a.ics"] = _ics(_vevent("a1", "20240311T090000Z", "20240311T100000Z"))
        store = FakeStore(members=[_member("a", "https://feeds.example/a.ics")])
        store.fail_events = True

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(11, 11))

        assert [event.id for event in events] == ["ical-a-a1"]

    @pytest.mark.asyncio
    async def test_failing_member_lookup_keeps_local_events(self, cache):
        store = FakeStore(
            events=[_local("local-1", datetime(2024, 3, 11, 9, tzinfo=UTC), datetime(2024, 3, 11, 10, tzinfo=UTC))],
        )
        store.fail_members = True

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(11, 11))

        assert [event.id for event in events] == ["local-1"]

    @pytest.mark.asyncio
    async def test_hidden_member_and_blank_url_are_not_fetched(self, feeds, cache):
        feeds["https://feeds.example/a.ics"] = _ics(_vevent("a1", "20240311T090000Z", "20240311T100000Z"))
        store = FakeStore(members=[
            _member("hidden", "https://feeds.example/a.ics", hidden=True),
            _member("blank", "   "),
        ])

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(11, 11))

        assert events == []
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_meals_outside_range_are_excluded(self, cache):
        store = FakeStore(meal_plans=[
            MealPlan(id="in", family_id=FAMILY_ID, date=date(2024, 3, 11), meal_type="lunch",
                     food_name="", notes="", assignee_ids=[]),
            MealPlan(id="out", family_id=FAMILY_ID, date=date(2024, 3, 12), meal_type="lunch",
                     food_name="", notes="", assignee_ids=[]),
        ])

        events = await EventAggregator(store, cache, tz=UTC).aggregate(FAMILY_ID, *_range(11, 11))

        assert [event.id for event in events] == ["meal-in"]
