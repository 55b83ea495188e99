"""
Google Calendar Module - writes local events into a family's Google calendar.

Components:
- client.py: GoogleCalendarClient (calendarList, events insert/update/delete)
- schemas.py: CalendarInfo and the event write body
"""

from app.environments.google.calendar.client import GoogleCalendarClient
from app.environments.google.calendar.schemas import (
    CalendarInfo,
    CalendarListResponse,
    GoogleEventBody,
)

__all__ = [
    "GoogleCalendarClient",
    "CalendarInfo",
    "CalendarListResponse",
    "GoogleEventBody",
]
