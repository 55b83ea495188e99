"""
Family calendar schemas - shared iCal feeds that apply to the whole family.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.family_calendar import FAMILY_CALENDAR_COLORS


class FamilyCalendarCreate(BaseModel):
    """
    Schema for POST /family-calendars.

    Example request body:
    {
        "name": "School holidays",
        "ical_url": "https://council.example/term-dates.ics",
        "color": "#0EA5E9"
    }
    """
    name: str = Field(..., min_length=1, max_length=100)
    ical_url: str = Field(..., min_length=1)
    color: str = Field(FAMILY_CALENDAR_COLORS[0], max_length=16)
    hidden: bool = False


class FamilyCalendarUpdate(BaseModel):
    """Schema for PATCH /family-calendars/{id}. Only provided fields are changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    ical_url: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = Field(None, max_length=16)
    hidden: Optional[bool] = None


class FamilyCalendarOut(BaseModel):
    id: str
    name: str
    color: str
    ical_url: str
    hidden: bool
    created_at: datetime

    class Config:
        from_attributes = True
