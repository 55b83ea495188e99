"""
Meal plan model - one planned meal on one day.

Meal plans are not calendar events; app/services/meal_events.py turns them
into read-only pseudo-events at fixed times of day for the calendar views.
"""

import uuid
import datetime as dt
from typing import List

from sqlalchemy import String, ForeignKey, Text, JSON, Date
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.db.types import UTCDateTime


MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


class MealPlan(Base):
    """SQLAlchemy ORM model for the 'meal_plans' table."""

    __tablename__ = "meal_plans"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    family_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # date: Calendar day of the meal (no time; the time comes from meal_type)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)

    # meal_type: One of MEAL_TYPES
    meal_type: Mapped[str] = mapped_column(String(20), nullable=False)

    food_name: Mapped[str] = mapped_column(String(255), default="")
    notes: Mapped[str] = mapped_column(Text, default="")
    assignee_ids: Mapped[List[str]] = mapped_column(JSON, default=list)

    created_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=lambda: dt.datetime.now(dt.timezone.utc)
    )

    def __repr__(self) -> str:
        return f"<MealPlan(id={self.id}, date={self.date}, meal_type='{self.meal_type}')>"
