"""
Dependencies module - reusable FastAPI dependencies for route handlers.

- get_current_user: validates the bearer JWT and loads the User
- get_aggregator: builds an EventAggregator over the request session and
  the process-wide iCal cache
- get_google_auth_client: OAuth client for the /auth/google routes
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.environments.google.auth.client import GoogleAuthClient
from app.models.user import User
from app.services.calendar_store import SqlCalendarStore
from app.services.event_aggregator import EventAggregator
from app.services.ical_cache import ICalFetchCache, get_ical_cache

# ---------------------------------------------------------------------------
# SECURITY SCHEME
# ---------------------------------------------------------------------------
# HTTPBearer reads "Authorization: Bearer <token>"; a missing header is
# rejected before get_current_user runs.
security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Validate the JWT and return the authenticated user.

    Raises:
        401 Unauthorized: Invalid or expired token, or unknown user
        403 Forbidden: Deactivated account
    """
    # One error for every failure so callers can't probe which part was wrong
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        user_id: str | None = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )

    return user


def get_aggregator(
    db: Session = Depends(get_db),
    ical_cache: ICalFetchCache = Depends(get_ical_cache),
) -> EventAggregator:
    """EventAggregator for the current request."""
    return EventAggregator(SqlCalendarStore(db), ical_cache)


def get_google_auth_client() -> GoogleAuthClient:
    """Google OAuth client built from settings (overridden in tests)."""
    return GoogleAuthClient()
