"""
Database session management - SQLAlchemy engine and session factory.
This module provides the database connection and session dependency for FastAPI.
"""

from sqlalchemy import create_engine  # Creates the database connection pool
from sqlalchemy.orm import sessionmaker  # Factory for creating database sessions

from app.core.config import settings  # App configuration with DATABASE_URL

# ---------------------------------------------------------------------------
# DATABASE ENGINE
# ---------------------------------------------------------------------------
# pool_pre_ping=True: check pooled connections before use so a database
# restart doesn't surface as errors on the kitchen display.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
)

# ---------------------------------------------------------------------------
# SESSION FACTORY
# ---------------------------------------------------------------------------
# - autocommit=False: routes call db.commit() explicitly
# - autoflush=False: we control when flushes happen
#
# SessionLocal is also used directly by post-commit background tasks
# (see app/services/google_sync.py), which outlive the request session.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    FastAPI dependency that provides a database session.

    Usage in a route:
        @router.get("/events")
        def list_events(db: Session = Depends(get_db)):
            ...

    The session is closed after the response, even if the route raised.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """
    FastAPI dependency returning the session factory itself.

    Background tasks open their own session from this factory because the
    request session is already closed when they run. Tests override it.
    """
    return SessionLocal
