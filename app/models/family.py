"""
Family model - the household every other record belongs to.
A family groups users (logins), members (people shown on the calendar),
shared calendars, local events and meal plans.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.types import UTCDateTime


class Family(Base):
    """SQLAlchemy ORM model for the 'families' table."""

    __tablename__ = "families"

    # ---------------------------------------------------------------------------
    # PRIMARY KEY
    # ---------------------------------------------------------------------------
    # id: String UUID - ids are embedded in source-namespaced event ids,
    # so they are kept as plain text end to end
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=lambda: datetime.now(timezone.utc)
    )

    # ---------------------------------------------------------------------------
    # RELATIONSHIPS
    # ---------------------------------------------------------------------------
    users: Mapped[list["User"]] = relationship("User", back_populates="family")
    members: Mapped[list["FamilyMember"]] = relationship(
        "FamilyMember", back_populates="family", cascade="all, delete-orphan"
    )
    calendars: Mapped[list["FamilyCalendar"]] = relationship(
        "FamilyCalendar", back_populates="family", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Family(id={self.id}, name='{self.name}')>"
