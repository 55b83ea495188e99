"""
Google connection schemas - calendar picker and connection status.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class GoogleCalendarOption(BaseModel):
    """One writable Google calendar the family can mirror into."""
    id: str
    summary: str
    primary: bool = False
    background_color: Optional[str] = None


class GoogleCalendarSelect(BaseModel):
    """
    Schema for POST /auth/google/connect.

    Example request body:
    {
        "calendar_id": "family0123@group.calendar.google.com",
        "calendar_name": "Family"
    }
    """
    calendar_id: str = Field(..., min_length=1)
    calendar_name: str = ""


class GoogleConnectionStatus(BaseModel):
    connected: bool
    pending: bool = False
    calendar_id: Optional[str] = None
    calendar_name: Optional[str] = None
    token_expiry: Optional[datetime] = None
