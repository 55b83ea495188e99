"""
Family member model - a person shown on the calendar.

Members are not logins. Each member has a display color and may publish a
personal iCal feed (e.g. a school or work calendar) that the aggregator
merges into the family view.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.types import UTCDateTime


class FamilyMember(Base):
    """SQLAlchemy ORM model for the 'family_members' table."""

    __tablename__ = "family_members"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    family_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # color: Hex color used for the member's column and event chips
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#E9D5FF")

    # ical_url: Optional personal feed; empty string means "no feed"
    ical_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")

    # hidden: Hidden members and their feeds are left out of the calendar
    hidden: Mapped[bool] = mapped_column(default=False)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=lambda: datetime.now(timezone.utc)
    )

    family: Mapped["Family"] = relationship("Family", back_populates="members")

    def has_feed(self) -> bool:
        """True when a non-blank feed URL is configured."""
        return bool(self.ical_url and self.ical_url.strip())

    def __repr__(self) -> str:
        return f"<FamilyMember(id={self.id}, name='{self.name}')>"
