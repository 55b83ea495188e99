"""
Google Calendar Schemas - calendar list entries and the event write body.

Reference: https://developers.google.com/calendar/api/v3/reference
"""

from typing import Optional, List, Dict
from pydantic import BaseModel, Field


class CalendarInfo(BaseModel):
    """
    One entry of the user's calendar list, offered in the calendar picker.
    """
    id: str = Field(..., description="Calendar identifier (usually email)")
    summary: str = Field("", description="Calendar title")
    primary: Optional[bool] = Field(False, description="Is this the primary calendar?")
    background_color: Optional[str] = Field(None, alias="backgroundColor")
    access_role: Optional[str] = Field(None, alias="accessRole")

    def is_writable(self) -> bool:
        """Events can only be mirrored into calendars we may write to."""
        return self.access_role in ("owner", "writer")

    class Config:
        populate_by_name = True


class CalendarListResponse(BaseModel):
    """Response from the CalendarList API."""
    items: List[CalendarInfo] = Field(default_factory=list)
    next_page_token: Optional[str] = Field(None, alias="nextPageToken")

    class Config:
        populate_by_name = True


class GoogleEventBody(BaseModel):
    """
    Body for events.insert / events.update.

    start/end are either {"date": "YYYY-MM-DD"} (all-day) or
    {"dateTime": "<ISO-8601>"} (timed). Empty optional fields are left out
    of the serialized body.

    Example:
    {
        "summary": "Swimming",
        "start": {"dateTime": "2026-03-10T16:00:00+00:00"},
        "end": {"dateTime": "2026-03-10T17:00:00+00:00"},
        "recurrence": ["RRULE:FREQ=WEEKLY;INTERVAL=1;BYDAY=TU"]
    }
    """
    summary: str
    start: Dict[str, str]
    end: Dict[str, str]
    location: Optional[str] = None
    description: Optional[str] = None
    recurrence: Optional[List[str]] = None

    def to_api(self) -> dict:
        return self.model_dump(exclude_none=True)
