"""
Google connection model - stores the OAuth tokens a family granted for
mirroring local events into one of their Google calendars.

One row per family. The row is created by the OAuth callback with
calendar_id = "pending"; the user then picks a target calendar, which
replaces the sentinel. While the sentinel is present, sync is a no-op.

Example Usage:
    connection = GoogleConnection(
        family_id=family.id,
        access_token="ya29.xxx",
        refresh_token="1//xxx",
        token_expiry=datetime.now(timezone.utc) + timedelta(hours=1),
        calendar_id=PENDING_CALENDAR_ID,
    )
"""

import uuid
from datetime import datetime, timezone, timedelta
from typing import Optional

from sqlalchemy import String, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.db.types import UTCDateTime


# Marker stored in calendar_id between authorization and calendar selection
PENDING_CALENDAR_ID = "pending"


class GoogleConnection(Base):
    """
    SQLAlchemy ORM model for the 'google_connections' table.

    Key Features:
    - One connection per family (unique family_id)
    - Stores both access and refresh tokens for persistent access
    - Tracks token expiry for proactive refresh
    """

    __tablename__ = "google_connections"

    # ---------------------------------------------------------------------------
    # PRIMARY KEY
    # ---------------------------------------------------------------------------
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    # ---------------------------------------------------------------------------
    # FAMILY RELATIONSHIP
    # ---------------------------------------------------------------------------
    # family_id: unique - a family mirrors into exactly one Google calendar
    family_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("families.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    # ---------------------------------------------------------------------------
    # TOKEN DATA
    # ---------------------------------------------------------------------------
    # access_token: Short-lived token for API access (Text: tokens can be long)
    access_token: Mapped[str] = mapped_column(Text, nullable=False)

    # refresh_token: Long-lived token for obtaining new access tokens
    refresh_token: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # token_expiry: When access_token stops working
    token_expiry: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    # ---------------------------------------------------------------------------
    # TARGET CALENDAR
    # ---------------------------------------------------------------------------
    calendar_id: Mapped[str] = mapped_column(String(255), nullable=False, default=PENDING_CALENDAR_ID)
    calendar_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # ---------------------------------------------------------------------------
    # TIMESTAMPS
    # ---------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ---------------------------------------------------------------------------
    # HELPER METHODS
    # ---------------------------------------------------------------------------
    def is_pending(self) -> bool:
        """True while the user has authorized but not yet picked a calendar."""
        return self.calendar_id == PENDING_CALENDAR_ID

    def needs_refresh(self, margin_seconds: int = 60, now: Optional[datetime] = None) -> bool:
        """
        Check whether the access token must be refreshed before use.

        Args:
            margin_seconds: Refresh when expiry is closer than this
            now: Override the current time (tests)

        Returns:
            True if the token is expired or expires within the margin
        """
        now = now or datetime.now(timezone.utc)
        return self.token_expiry <= now + timedelta(seconds=margin_seconds)

    def __repr__(self) -> str:
        return f"<GoogleConnection(family_id={self.family_id}, calendar_id='{self.calendar_id}')>"
