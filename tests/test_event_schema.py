"""
Tests for the merged calendar event schema.

These tests verify:
- All-day detection (UTC midnight on both ends, at least a day long)
- Instants are normalized to UTC
- Strict range overlap
"""

from datetime import datetime, timedelta, timezone

from app.schemas.event import CalendarEvent, EventSource, is_all_day_span


UTC = timezone.utc


def _event(start: datetime, end: datetime) -> CalendarEvent:
    return CalendarEvent(id="e1", title="Event", start_time=start, end_time=end, source=EventSource.ICAL)


class TestAllDayDetection:

    def test_two_midnight_to_midnight_days_is_all_day(self):
        event = _event(datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 1, 3, tzinfo=UTC))
        assert event.is_all_day()

    def test_midnight_to_noon_is_not_all_day(self):
        event = _event(datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 1, 1, 12, tzinfo=UTC))
        assert not event.is_all_day()

    def test_single_day(self):
        assert is_all_day_span(datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 1, 2, tzinfo=UTC))

    def test_zero_length_at_midnight_is_not_all_day(self):
        midnight = datetime(2024, 1, 1, tzinfo=UTC)
        assert not is_all_day_span(midnight, midnight)

    def test_local_midnight_off_utc_is_not_all_day(self):
        plus_two = timezone(timedelta(hours=2))
        start = datetime(2024, 1, 1, tzinfo=plus_two)
        end = datetime(2024, 1, 2, tzinfo=plus_two)
        assert not is_all_day_span(start, end)


class TestCalendarEvent:

    def test_offsets_are_normalized_to_utc(self):
        start = datetime(2024, 1, 1, 10, tzinfo=timezone(timedelta(hours=2)))
        event = _event(start, start + timedelta(hours=1))
        assert event.start_time == datetime(2024, 1, 1, 8, tzinfo=UTC)
        assert event.start_time.utcoffset() == timedelta(0)

    def test_overlap_is_strict_at_the_edges(self):
        event = _event(datetime(2024, 1, 1, 9, tzinfo=UTC), datetime(2024, 1, 1, 10, tzinfo=UTC))
        assert event.overlaps(datetime(2024, 1, 1, 9, 30, tzinfo=UTC), datetime(2024, 1, 1, 11, tzinfo=UTC))
        assert not event.overlaps(datetime(2024, 1, 1, 10, tzinfo=UTC), datetime(2024, 1, 1, 11, tzinfo=UTC))
