"""
Time-Grid Layout Engine - positions events on the week and day views.

Two pure computations, no I/O:

1. position_in_column: vertical offset and height (in pixels) of a timed
   event inside one day column with a visible hour window, e.g. 7:00-19:00
   at 64 px per hour.

2. pack_all_day_lanes: assigns all-day events of a week to horizontal
   lanes so that no two events in the same lane overlap. Greedy first-fit:
   events are laid out by start column, longer ones first, and each goes
   into the lowest lane whose previous occupant ended at or before its
   start column.

Both are deterministic for a given input order.

Day boundaries and wall-clock minutes are taken in the display timezone,
which is the host's local zone unless a tzinfo is passed.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import List, Optional, Tuple

from app.schemas.event import CalendarEvent


DEFAULT_WINDOW_START_HOUR = 7
DEFAULT_WINDOW_END_HOUR = 19
DEFAULT_PX_PER_HOUR = 64
MIN_EVENT_HEIGHT = 22

DAYS_PER_WEEK = 7
SECONDS_PER_DAY = 86400


# ---------------------------------------------------------------------------
# RESULT TYPES
# ---------------------------------------------------------------------------

@dataclass
class GridPosition:
    top: float
    height: float


@dataclass
class AllDayPlacement:
    event: CalendarEvent
    lane: int
    start_column: int
    span_columns: int


@dataclass
class AllDayLanes:
    placements: List[AllDayPlacement] = field(default_factory=list)
    lane_count: int = 0


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------

def local_midnight(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """Aware datetime for 00:00 of day in tz (host local zone when None)."""
    naive = datetime.combine(day, time.min)
    if tz is None:
        return naive.astimezone()
    return naive.replace(tzinfo=tz)


def day_range(first_day: date, last_day: date, tz: Optional[tzinfo] = None) -> Tuple[datetime, datetime]:
    """first_day 00:00:00 .. last_day 23:59:59 in the display timezone."""
    range_start = local_midnight(first_day, tz)
    range_end = local_midnight(last_day + timedelta(days=1), tz) - timedelta(seconds=1)
    return range_start, range_end


def week_start_for(day: date) -> date:
    """The Sunday on or before day (weeks run Sunday..Saturday)."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _to_display(value: datetime, tz: Optional[tzinfo]) -> datetime:
    return value.astimezone(tz) if tz is not None else value.astimezone()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# TIMED EVENTS
# ---------------------------------------------------------------------------

def position_in_column(
    event: CalendarEvent,
    column_date: date,
    window_start_hour: int = DEFAULT_WINDOW_START_HOUR,
    window_end_hour: int = DEFAULT_WINDOW_END_HOUR,
    px_per_hour: float = DEFAULT_PX_PER_HOUR,
    tz: Optional[tzinfo] = None,
    min_height: float = MIN_EVENT_HEIGHT,
) -> Optional[GridPosition]:
    """
    Compute where a timed event sits inside one day column.

    Args:
        event: The event to place
        column_date: Calendar day of the column
        window_start_hour: First visible hour (e.g. 7)
        window_end_hour: Hour the visible window ends (e.g. 19)
        px_per_hour: Vertical pixels per hour
        tz: Display timezone (host local when None)
        min_height: Floor so very short events stay tappable

    Returns:
        GridPosition, or None if the event is not visible in this column
    """
    column_start = local_midnight(column_date, tz)
    column_end = local_midnight(column_date + timedelta(days=1), tz)

    start = event.start_time
    # end <= start is a zero-length event
    end = max(event.end_time, start)

    if start >= column_end or end <= column_start:
        return None

    window_start = window_start_hour * 60
    window_end = window_end_hour * 60

    if start < column_start:
        start_mins = 0
    else:
        local_start = _to_display(start, tz)
        start_mins = local_start.hour * 60 + local_start.minute

    if end >= column_end:
        end_mins = window_end
    else:
        local_end = _to_display(end, tz)
        end_mins = local_end.hour * 60 + local_end.minute

    if start_mins >= window_end:
        return None
    if start_mins < window_start and end_mins <= window_start:
        return None

    top = max((start_mins - window_start) / 60 * px_per_hour, 0)

    visible_start = max(start_mins, window_start)
    visible_end = min(max(end_mins, start_mins), window_end)
    visible_minutes = max(visible_end - visible_start, 0)
    height = max(visible_minutes / 60 * px_per_hour, min_height)

    return GridPosition(top=top, height=height)


# ---------------------------------------------------------------------------
# ALL-DAY LANES
# ---------------------------------------------------------------------------

def pack_all_day_lanes(
    events: List[CalendarEvent],
    week_start: datetime,
    week_end: datetime,
) -> AllDayLanes:
    """
    Assign the week's all-day events to non-overlapping lanes.

    Args:
        events: Any events; timed ones and those outside the week are ignored
        week_start: Aware start of the first column
        week_end: Aware end of the last column (exclusive)

    Returns:
        Placements in layout order plus the number of lanes used
    """
    candidates = []
    for event in events:
        if not event.is_all_day():
            continue
        if not event.overlaps(week_start, week_end):
            continue

        start_offset = (event.start_time - week_start).total_seconds() / SECONDS_PER_DAY
        end_offset = (event.end_time - week_start).total_seconds() / SECONDS_PER_DAY
        start_column = _clamp(_round_half_up(start_offset), 0, DAYS_PER_WEEK)
        end_column = _clamp(_round_half_up(end_offset), 0, DAYS_PER_WEEK)
        span = end_column - start_column
        if span <= 0:
            continue
        candidates.append((event, start_column, end_column, span))

    # sorted() is stable, so ties keep input order
    candidates = sorted(candidates, key=lambda item: (item[1], -item[3]))

    result = AllDayLanes()
    lane_end_columns: List[int] = []

    for event, start_column, end_column, span in candidates:
        lane = next(
            (index for index, lane_end in enumerate(lane_end_columns) if lane_end <= start_column),
            None,
        )
        if lane is None:
            lane = len(lane_end_columns)
            lane_end_columns.append(end_column)
        else:
            lane_end_columns[lane] = end_column

        result.placements.append(
            AllDayPlacement(event=event, lane=lane, start_column=start_column, span_columns=span)
        )

    result.lane_count = len(lane_end_columns)
    return result
