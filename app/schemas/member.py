"""
Family member schemas - people shown on the calendar, each optionally
publishing a personal iCal feed.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# REQUEST SCHEMAS
# ---------------------------------------------------------------------------

class MemberCreate(BaseModel):
    """
    Schema for POST /members.

    Example request body:
    {
        "name": "Mia",
        "color": "#FBCFE8",
        "ical_url": "https://school.example/mia.ics"
    }
    """
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field("#E9D5FF", max_length=16)
    ical_url: str = ""
    hidden: bool = False


class MemberUpdate(BaseModel):
    """Schema for PATCH /members/{id}. Only provided fields are changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, max_length=16)
    ical_url: Optional[str] = None
    hidden: Optional[bool] = None


# ---------------------------------------------------------------------------
# RESPONSE SCHEMAS
# ---------------------------------------------------------------------------

class MemberOut(BaseModel):
    id: str
    name: str
    color: str
    ical_url: Optional[str] = ""
    hidden: bool
    created_at: datetime

    class Config:
        from_attributes = True
