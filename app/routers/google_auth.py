"""
Google Auth Router - connects a family's Google account for event mirroring.

Endpoints:
==========
- GET    /auth/google/login     → Redirect to Google OAuth consent screen
- GET    /auth/google/callback  → Handle OAuth callback, store tokens
- GET    /auth/google/calendars → Writable calendars to mirror into
- POST   /auth/google/connect   → Pick the target calendar
- GET    /auth/google/status    → Connection state
- DELETE /auth/google           → Disconnect

OAuth Flow:
===========
1. The app calls GET /auth/google/login and follows the redirect
2. The user grants the calendar scopes
3. Google redirects to /auth/google/callback with code and state
4. The backend stores the tokens with calendar_id = "pending"
5. The app lists /auth/google/calendars and POSTs the choice to /connect

Until step 5 the connection stays pending and sync does nothing.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_current_user, get_google_auth_client
from app.environments.base import EnvironmentError
from app.environments.google import GoogleAuthClient, GoogleCalendarClient
from app.models.google_connection import PENDING_CALENDAR_ID, GoogleConnection
from app.models.user import User
from app.schemas.google import GoogleCalendarOption, GoogleCalendarSelect, GoogleConnectionStatus
from app.services.google_sync import GoogleCalendarSync


logger = logging.getLogger("familyhub.routers.google_auth")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/auth/google", tags=["google-auth"])


# ---------------------------------------------------------------------------
# STATE STORAGE (in-memory, single process)
# ---------------------------------------------------------------------------
_oauth_states: dict[str, dict] = {}


def _store_state(state: str, data: dict) -> None:
    """Store OAuth state data (CSRF protection)."""
    _oauth_states[state] = data


def _get_and_remove_state(state: str) -> Optional[dict]:
    """Retrieve and remove OAuth state data. Each state is single-use."""
    return _oauth_states.pop(state, None)


def _get_connection(db: Session, family_id: str) -> Optional[GoogleConnection]:
    return db.query(GoogleConnection).filter(GoogleConnection.family_id == family_id).first()


def _get_connection_or_404(db: Session, family_id: str) -> GoogleConnection:
    connection = _get_connection(db, family_id)
    if not connection:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No Google account connected",
        )
    return connection


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.get("/login")
async def google_login(
    current_user: User = Depends(get_current_user),
    redirect_after: Optional[str] = Query(None, description="URL to redirect after auth"),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """
    Start the OAuth flow by redirecting to Google's consent screen.

    Raises:
        503: If GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET are not set
    """
    if not auth_client.is_configured():
        logger.error("Google OAuth not configured - missing client credentials")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google OAuth is not configured. Please set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET.",
        )

    state = auth_client.generate_state()
    _store_state(state, {
        "family_id": current_user.family_id,
        "redirect_after": redirect_after,
    })

    logger.info(f"Initiating Google OAuth for family {current_user.family_id}")

    return RedirectResponse(url=auth_client.get_authorization_url(state=state))


@router.get("/callback")
async def google_callback(
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    state: Optional[str] = Query(None, description="CSRF state token"),
    error: Optional[str] = Query(None, description="Error from Google"),
    error_description: Optional[str] = Query(None, description="Error details"),
    db: Session = Depends(get_db),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """
    Exchange the code for tokens and store them as a pending connection.

    A reconnect keeps the previous refresh token when Google does not send
    a new one, and resets the calendar choice.
    """
    if error:
        logger.warning(f"Google OAuth error: {error} - {error_description}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Google authorization failed: {error_description or error}",
        )

    if not code or not state:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing authorization code or state parameter",
        )

    state_data = _get_and_remove_state(state)
    if not state_data:
        logger.warning("Invalid or expired OAuth state")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired state. Please try again.",
        )

    family_id = state_data["family_id"]

    try:
        tokens = await auth_client.exchange_code_for_tokens(code=code)
    except EnvironmentError as e:
        logger.error(f"Failed to exchange code for tokens: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to complete authentication: {e}",
        )

    expires_at = tokens.expires_at or datetime.now(timezone.utc) + timedelta(hours=1)

    connection = _get_connection(db, family_id)
    if connection:
        connection.access_token = tokens.access_token
        connection.refresh_token = tokens.refresh_token or connection.refresh_token
        connection.token_expiry = expires_at
        connection.calendar_id = PENDING_CALENDAR_ID
        connection.calendar_name = ""
        logger.info(f"Updated Google connection for family {family_id}")
    else:
        db.add(GoogleConnection(
            family_id=family_id,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token or "",
            token_expiry=expires_at,
            calendar_id=PENDING_CALENDAR_ID,
        ))
        logger.info(f"Created Google connection for family {family_id}")

    db.commit()

    redirect_after = state_data.get("redirect_after")
    if redirect_after:
        return RedirectResponse(url=redirect_after)

    return {
        "status": "success",
        "message": "Google account connected. Choose a calendar to finish.",
    }


@router.get("/calendars", response_model=list[GoogleCalendarOption])
async def list_google_calendars(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """Writable calendars of the connected account, primary first."""
    connection = _get_connection_or_404(db, current_user.family_id)

    try:
        access_token = await GoogleCalendarSync(db, auth_client=auth_client)._valid_access_token(connection)
        calendars = await GoogleCalendarClient(access_token, transport=auth_client._transport).list_calendars()
    except EnvironmentError as e:
        logger.error(f"Failed to list Google calendars: {e}", extra={"family_id": current_user.family_id})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not load calendars from Google",
        )

    writable = [calendar for calendar in calendars if calendar.is_writable()]
    writable.sort(key=lambda calendar: not calendar.primary)

    return [
        GoogleCalendarOption(
            id=calendar.id,
            summary=calendar.summary,
            primary=bool(calendar.primary),
            background_color=calendar.background_color,
        )
        for calendar in writable
    ]


@router.post("/connect", response_model=GoogleConnectionStatus)
async def connect_google_calendar(
    payload: GoogleCalendarSelect,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Choose the calendar local events are mirrored into."""
    connection = _get_connection_or_404(db, current_user.family_id)

    if payload.calendar_id == PENDING_CALENDAR_ID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid calendar id",
        )

    connection.calendar_id = payload.calendar_id
    connection.calendar_name = payload.calendar_name
    db.commit()

    logger.info(
        f"Family {current_user.family_id} mirrors into Google calendar",
        extra={"calendar_id": payload.calendar_id},
    )

    return GoogleConnectionStatus(
        connected=True,
        pending=False,
        calendar_id=connection.calendar_id,
        calendar_name=connection.calendar_name,
        token_expiry=connection.token_expiry,
    )


@router.get("/status", response_model=GoogleConnectionStatus)
async def google_connection_status(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    connection = _get_connection(db, current_user.family_id)
    if not connection:
        return GoogleConnectionStatus(connected=False)

    pending = connection.is_pending()
    return GoogleConnectionStatus(
        connected=True,
        pending=pending,
        calendar_id=None if pending else connection.calendar_id,
        calendar_name=None if pending else connection.calendar_name,
        token_expiry=connection.token_expiry,
    )


@router.delete("")
async def disconnect_google(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth_client: GoogleAuthClient = Depends(get_google_auth_client),
):
    """
    Revoke the token at Google and remove the stored connection.

    Revocation failures are logged; the connection is removed regardless.
    """
    connection = _get_connection_or_404(db, current_user.family_id)

    token = connection.refresh_token or connection.access_token
    if token and not await auth_client.revoke_token(token):
        logger.warning(f"Google token revocation failed for family {current_user.family_id}")

    db.delete(connection)
    db.commit()

    logger.info(f"Disconnected Google account for family {current_user.family_id}")

    return {"status": "success", "message": "Google account disconnected"}
