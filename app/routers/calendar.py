"""
Calendar router - the merged, read-only calendar views.

Endpoints:
==========
- GET /calendar/events → merged events of every source for a day or range
- GET /calendar/week   → week layout (all-day lanes + timed positions per day)
- GET /calendar/day    → day column layout

Days are interpreted in the server's local timezone (the kitchen display
and the server share a household), from 00:00:00 to 23:59:59.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.deps import get_aggregator, get_current_user
from app.models.user import User
from app.schemas.calendar import (
    AllDayPlacementOut,
    DayColumnOut,
    DayLayoutOut,
    PositionedEvent,
    WeekLayoutOut,
)
from app.schemas.event import CalendarEvent
from app.services.event_aggregator import EventAggregator
from app.services.time_grid import (
    DAYS_PER_WEEK,
    DEFAULT_PX_PER_HOUR,
    DEFAULT_WINDOW_END_HOUR,
    DEFAULT_WINDOW_START_HOUR,
    day_range,
    local_midnight,
    pack_all_day_lanes,
    position_in_column,
    week_start_for,
)


logger = logging.getLogger("familyhub.routers.calendar")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/calendar", tags=["calendar"])


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------

def _check_window(window_start: int, window_end: int) -> None:
    if window_end <= window_start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="window_end must be after window_start",
        )


def _position_timed(
    events: List[CalendarEvent],
    column_date: date,
    window_start: int,
    window_end: int,
    px_per_hour: float,
) -> List[PositionedEvent]:
    positioned = []
    for event in events:
        if event.is_all_day():
            continue
        position = position_in_column(event, column_date, window_start, window_end, px_per_hour)
        if position is not None:
            positioned.append(PositionedEvent(event=event, top=position.top, height=position.height))
    return positioned


# ---------------------------------------------------------------------------
# GET /calendar/events
# ---------------------------------------------------------------------------

@router.get("/events", response_model=List[CalendarEvent])
async def list_calendar_events(
    day: Optional[date] = Query(None, alias="date", description="Single day (YYYY-MM-DD)"),
    start: Optional[date] = Query(None, description="First day of range"),
    end: Optional[date] = Query(None, description="Last day of range (inclusive)"),
    current_user: User = Depends(get_current_user),
    aggregator: EventAggregator = Depends(get_aggregator),
):
    """
    Merged events from local storage, member feeds, family feeds and meal plans.

    Pass either ?date= or both ?start= and ?end=. Sources that fail are
    left out rather than failing the request.
    """
    if day is not None:
        first_day, last_day = day, day
    elif start is not None and end is not None:
        first_day, last_day = start, end
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide either date or both start and end",
        )

    if last_day < first_day:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must not be before start",
        )

    range_start, range_end = day_range(first_day, last_day)
    return await aggregator.aggregate(current_user.family_id, range_start, range_end)


# ---------------------------------------------------------------------------
# GET /calendar/week
# ---------------------------------------------------------------------------

@router.get("/week", response_model=WeekLayoutOut)
async def week_layout(
    day: date = Query(..., alias="date", description="Any day inside the week"),
    window_start: int = Query(DEFAULT_WINDOW_START_HOUR, ge=0, le=23),
    window_end: int = Query(DEFAULT_WINDOW_END_HOUR, ge=1, le=24),
    px_per_hour: float = Query(DEFAULT_PX_PER_HOUR, gt=0),
    current_user: User = Depends(get_current_user),
    aggregator: EventAggregator = Depends(get_aggregator),
):
    """
    Layout of the Sunday..Saturday week containing ?date=.

    All-day events are packed into lanes for the banner row; timed events
    are positioned inside each day's column.
    """
    _check_window(window_start, window_end)

    first_day = week_start_for(day)
    last_day = first_day + timedelta(days=DAYS_PER_WEEK - 1)
    range_start, range_end = day_range(first_day, last_day)

    events = await aggregator.aggregate(current_user.family_id, range_start, range_end)

    lanes = pack_all_day_lanes(
        events,
        local_midnight(first_day),
        local_midnight(first_day + timedelta(days=DAYS_PER_WEEK)),
    )

    days = []
    for offset in range(DAYS_PER_WEEK):
        column_date = first_day + timedelta(days=offset)
        days.append(
            DayColumnOut(
                date=column_date,
                events=_position_timed(events, column_date, window_start, window_end, px_per_hour),
            )
        )

    return WeekLayoutOut(
        week_start=first_day,
        window_start_hour=window_start,
        window_end_hour=window_end,
        px_per_hour=px_per_hour,
        lane_count=lanes.lane_count,
        all_day=[
            AllDayPlacementOut(
                event=placement.event,
                lane=placement.lane,
                start_column=placement.start_column,
                span_columns=placement.span_columns,
            )
            for placement in lanes.placements
        ],
        days=days,
    )


# ---------------------------------------------------------------------------
# GET /calendar/day
# ---------------------------------------------------------------------------

@router.get("/day", response_model=DayLayoutOut)
async def day_layout(
    day: date = Query(..., alias="date", description="Day to lay out"),
    window_start: int = Query(DEFAULT_WINDOW_START_HOUR, ge=0, le=23),
    window_end: int = Query(DEFAULT_WINDOW_END_HOUR, ge=1, le=24),
    px_per_hour: float = Query(DEFAULT_PX_PER_HOUR, gt=0),
    current_user: User = Depends(get_current_user),
    aggregator: EventAggregator = Depends(get_aggregator),
):
    """Positions of the day's timed events plus its all-day events."""
    _check_window(window_start, window_end)

    range_start, range_end = day_range(day, day)
    events = await aggregator.aggregate(current_user.family_id, range_start, range_end)

    return DayLayoutOut(
        date=day,
        window_start_hour=window_start,
        window_end_hour=window_end,
        px_per_hour=px_per_hour,
        all_day=[event for event in events if event.is_all_day()],
        events=_position_timed(events, day, window_start, window_end, px_per_hour),
    )
