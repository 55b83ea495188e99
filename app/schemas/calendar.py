"""
Calendar view schemas - responses of the merged calendar and layout endpoints.
"""

import datetime as dt
from typing import List

from pydantic import BaseModel, Field

from app.schemas.event import CalendarEvent


class PositionedEvent(BaseModel):
    """A timed event with its pixel position inside a day column."""
    event: CalendarEvent
    top: float
    height: float


class AllDayPlacementOut(BaseModel):
    """An all-day event assigned to a lane of the week's all-day row."""
    event: CalendarEvent
    lane: int
    start_column: int
    span_columns: int


class DayColumnOut(BaseModel):
    date: dt.date
    events: List[PositionedEvent] = Field(default_factory=list)


class WeekLayoutOut(BaseModel):
    """
    Response of GET /calendar/week.

    Example (abridged):
    {
        "week_start": "2026-03-08",
        "window_start_hour": 7,
        "window_end_hour": 19,
        "px_per_hour": 64,
        "lane_count": 2,
        "all_day": [{"event": {...}, "lane": 0, "start_column": 1, "span_columns": 3}],
        "days": [{"date": "2026-03-08", "events": [{"event": {...}, "top": 128.0, "height": 64.0}]}]
    }
    """
    week_start: dt.date
    window_start_hour: int
    window_end_hour: int
    px_per_hour: float
    lane_count: int
    all_day: List[AllDayPlacementOut] = Field(default_factory=list)
    days: List[DayColumnOut] = Field(default_factory=list)


class DayLayoutOut(BaseModel):
    """Response of GET /calendar/day."""
    date: dt.date
    window_start_hour: int
    window_end_hour: int
    px_per_hour: float
    all_day: List[CalendarEvent] = Field(default_factory=list)
    events: List[PositionedEvent] = Field(default_factory=list)
