"""
Family calendar model - a shared iCal feed (school holidays, sports club,
public holidays) that applies to the whole family rather than one member.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.types import UTCDateTime


# Saturated colors offered for shared calendars (members use soft pastels)
FAMILY_CALENDAR_COLORS = [
    "#6366F1",  # indigo
    "#0EA5E9",  # sky
    "#10B981",  # emerald
    "#F59E0B",  # amber
    "#EC4899",  # pink
    "#8B5CF6",  # violet
    "#EF4444",  # red
    "#14B8A6",  # teal
]


class FamilyCalendar(Base):
    """SQLAlchemy ORM model for the 'family_calendars' table."""

    __tablename__ = "family_calendars"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    family_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # color: Carried onto every event of this feed (they have no member color)
    color: Mapped[str] = mapped_column(String(16), nullable=False, default=FAMILY_CALENDAR_COLORS[0])

    ical_url: Mapped[str] = mapped_column(Text, nullable=False, default="")

    hidden: Mapped[bool] = mapped_column(default=False)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=lambda: datetime.now(timezone.utc)
    )

    family: Mapped["Family"] = relationship("Family", back_populates="calendars")

    def has_feed(self) -> bool:
        """True when a non-blank feed URL is configured."""
        return bool(self.ical_url and self.ical_url.strip())

    def __repr__(self) -> str:
        return f"<FamilyCalendar(id={self.id}, name='{self.name}')>"
