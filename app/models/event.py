"""
Event model - a locally stored calendar event.

Local events are the only editable source. They may carry a restricted
recurrence rule (see app/services/recurrence.py) and, once mirrored to
Google Calendar, the provider's event id.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import String, ForeignKey, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.db.types import UTCDateTime


class Event(Base):
    """
    SQLAlchemy ORM model for the 'events' table.

    All-day events are stored as UTC midnight .. UTC midnight (end exclusive),
    timed events as their UTC instants.
    """

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    family_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # ---------------------------------------------------------------------------
    # TIMES
    # ---------------------------------------------------------------------------
    start_time: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)

    # ---------------------------------------------------------------------------
    # DETAILS
    # ---------------------------------------------------------------------------
    location: Mapped[str] = mapped_column(Text, default="")
    notes: Mapped[str] = mapped_column(Text, default="")

    # assignee_ids: Member ids as a JSON array; [] = whole family
    assignee_ids: Mapped[List[str]] = mapped_column(JSON, default=list)

    # recurrence: "FREQ=WEEKLY;INTERVAL=1;BYDAY=MO,WE" style rule, "" = none
    recurrence: Mapped[str] = mapped_column(Text, default="")

    # google_event_id: Set by the post-commit sync task, "" until mirrored
    google_event_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default="")

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title='{self.title}')>"
