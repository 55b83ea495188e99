"""
Event schemas - the unified calendar event plus the request/response
formats for local event CRUD.

CalendarEvent is what every source (local rows, member feeds, family feeds,
meal plans) is normalized into before merging. Times are always aware UTC.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from app.schemas.recurrence import RepeatSettings


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# UNIFIED EVENT
# ---------------------------------------------------------------------------

class EventSource(str, Enum):
    """Where a merged event came from."""
    LOCAL = "local"
    ICAL = "ical"
    FAMILY_ICAL = "family-ical"
    MEAL = "meal"


class CalendarEvent(BaseModel):
    """
    One event in the merged calendar stream.

    Example response item:
    {
        "id": "ical-6f1c...-abc123@school.example",
        "title": "Parents evening",
        "start_time": "2026-03-12T17:00:00Z",
        "end_time": "2026-03-12T19:00:00Z",
        "location": "Main hall",
        "notes": "",
        "assignee_ids": ["6f1c..."],
        "recurrence": null,
        "source": "ical",
        "color": null
    }
    """
    id: str
    title: str
    start_time: datetime
    end_time: datetime
    location: str = ""
    notes: str = ""

    # assignee_ids: Member ids; [] = the whole family
    assignee_ids: List[str] = Field(default_factory=list)

    # recurrence: Rule string, local events only
    recurrence: Optional[str] = None

    source: EventSource

    # color: Set for family calendar events (they have no member color)
    color: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def is_all_day(self) -> bool:
        return is_all_day_span(self.start_time, self.end_time)

    def overlaps(self, range_start: datetime, range_end: datetime) -> bool:
        """Strict overlap with [range_start, range_end)."""
        return self.start_time < range_end and self.end_time > range_start


def _is_utc_midnight(value: datetime) -> bool:
    value = ensure_utc(value)
    return value.hour == 0 and value.minute == 0 and value.second == 0 and value.microsecond == 0


def is_all_day_span(start: datetime, end: datetime) -> bool:
    """
    True when both ends sit on UTC midnight and the span is at least one
    full day (end exclusive).
    """
    return (
        _is_utc_midnight(start)
        and _is_utc_midnight(end)
        and ensure_utc(end) - ensure_utc(start) >= timedelta(hours=24)
    )


# ---------------------------------------------------------------------------
# LOCAL EVENT REQUEST SCHEMAS
# ---------------------------------------------------------------------------

class EventCreate(BaseModel):
    """
    Schema for POST /events.

    Recurrence may be sent either as a raw rule string or as the structured
    "repeat" form; "repeat" wins when both are present.

    Example request body:
    {
        "title": "Swimming",
        "start_time": "2026-03-10T16:00:00Z",
        "end_time": "2026-03-10T17:00:00Z",
        "assignee_ids": ["6f1c..."],
        "repeat": {"mode": "weekly", "weekdays": ["TU"]}
    }
    """
    title: str = Field(..., min_length=1, max_length=255)
    start_time: datetime
    end_time: datetime
    location: str = ""
    notes: str = ""
    assignee_ids: List[str] = Field(default_factory=list)
    recurrence: Optional[str] = None
    repeat: Optional[RepeatSettings] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _check_order(self) -> "EventCreate":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    def resolved_recurrence(self) -> str:
        """The rule string to store."""
        if self.repeat is not None:
            return self.repeat.to_rule()
        return (self.recurrence or "").strip()


class EventUpdate(BaseModel):
    """
    Schema for PATCH /events/{id}. Only provided fields are changed.

    Example request body:
    {
        "title": "Swimming (pool B)",
        "repeat": {"mode": "none"}
    }
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    assignee_ids: Optional[List[str]] = None
    recurrence: Optional[str] = None
    repeat: Optional[RepeatSettings] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return ensure_utc(value)

    def resolved_recurrence(self) -> Optional[str]:
        """The new rule string, or None to leave the stored one alone."""
        if self.repeat is not None:
            return self.repeat.to_rule()
        if self.recurrence is not None:
            return self.recurrence.strip()
        return None


# ---------------------------------------------------------------------------
# LOCAL EVENT RESPONSE SCHEMA
# ---------------------------------------------------------------------------

class EventOut(BaseModel):
    """
    Schema for a stored local event in API responses.

    "repeat" is derived from the stored rule on the way out.
    """
    id: str
    title: str
    start_time: datetime
    end_time: datetime
    location: str = ""
    notes: str = ""
    assignee_ids: List[str] = Field(default_factory=list)
    recurrence: str = ""
    google_event_id: Optional[str] = None
    created_at: datetime

    @computed_field
    @property
    def repeat(self) -> RepeatSettings:
        return RepeatSettings.from_rule(self.recurrence)

    class Config:
        from_attributes = True
