"""
Declarative base - every ORM model inherits from Base.

Importing this module also imports all models so that Base.metadata
knows every table (needed by create_all in tests and by Alembic autogenerate).
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 declarative base class."""
    pass


# Register models on the metadata (imported for side effects)
from app.models import family, user, family_member, family_calendar, event, meal_plan, google_connection  # noqa: E402,F401
