"""
Google Calendar Sync - mirrors local events into the family's Google calendar.

Local data is the source of truth. Sync is best effort: every failure
(no connection, refresh rejected, API error, network down) is caught and
logged here, never raised to the caller, and never blocks a local write.

Flow for each operation:
1. Load the family's GoogleConnection; no connection or a "pending"
   calendar (authorized but no calendar chosen yet) means nothing to do
2. Refresh the access token when it expires within the refresh margin,
   persisting the new token before using it
3. Call the Calendar API

The routers schedule run_sync_create/update/delete as FastAPI background
tasks after the local commit. Those helpers open their own session because
the request session is closed by the time they run.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.environments.base import APIError, EnvironmentError
from app.environments.google.auth.client import GoogleAuthClient
from app.environments.google.calendar.client import GoogleCalendarClient
from app.environments.google.calendar.schemas import GoogleEventBody
from app.models.event import Event
from app.models.google_connection import GoogleConnection
from app.schemas.event import ensure_utc, is_all_day_span


logger = logging.getLogger("familyhub.services.google_sync")


# Statuses meaning "already deleted on Google's side"
GONE_STATUSES = (404, 410)


# ---------------------------------------------------------------------------
# PAYLOAD
# ---------------------------------------------------------------------------

def build_event_body(event: Event) -> GoogleEventBody:
    """
    Convert a local event into the Calendar API write body.

    All-day events use {"date": ...} (end date exclusive, as stored);
    timed events use {"dateTime": ...} in UTC.
    """
    start = ensure_utc(event.start_time)
    end = ensure_utc(event.end_time)

    if is_all_day_span(start, end):
        start_field = {"date": start.date().isoformat()}
        end_field = {"date": end.date().isoformat()}
    else:
        start_field = {"dateTime": start.isoformat()}
        end_field = {"dateTime": end.isoformat()}

    return GoogleEventBody(
        summary=event.title,
        start=start_field,
        end=end_field,
        location=event.location or None,
        description=event.notes or None,
        recurrence=[f"RRULE:{event.recurrence}"] if event.recurrence else None,
    )


# ---------------------------------------------------------------------------
# ADAPTER
# ---------------------------------------------------------------------------

class GoogleCalendarSync:
    """
    Pushes single local events to Google Calendar for one database session.

    Args:
        db: Session used to read and update the GoogleConnection
        auth_client: OAuth client for the refresh grant
        transport: Optional httpx transport for the Calendar client (tests)
        refresh_margin_seconds: Refresh when expiry is closer than this
        clock: Returns the current aware UTC time (tests)
    """

    def __init__(
        self,
        db: Session,
        auth_client: Optional[GoogleAuthClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        refresh_margin_seconds: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db = db
        self.auth_client = auth_client or GoogleAuthClient(transport=transport)
        self._transport = transport
        self.refresh_margin_seconds = (
            refresh_margin_seconds
            if refresh_margin_seconds is not None
            else settings.GOOGLE_TOKEN_REFRESH_MARGIN_SECONDS
        )
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # -------------------------------------------------------------------------
    # CONNECTION + TOKEN
    # -------------------------------------------------------------------------

    def _get_active_connection(self, family_id: str) -> Optional[GoogleConnection]:
        connection = self.db.execute(
            select(GoogleConnection).where(GoogleConnection.family_id == family_id)
        ).scalar_one_or_none()

        if connection is None:
            logger.debug("No Google connection, skipping sync", extra={"family_id": family_id})
            return None
        if connection.is_pending():
            logger.debug("Google calendar not chosen yet, skipping sync", extra={"family_id": family_id})
            return None
        return connection

    async def _valid_access_token(self, connection: GoogleConnection) -> str:
        """
        Return a usable access token, refreshing and persisting it first
        when it is expired or about to expire.

        Raises:
            TokenExpiredError: If the refresh grant fails
        """
        if not connection.needs_refresh(self.refresh_margin_seconds, now=self._clock()):
            return connection.access_token

        tokens = await self.auth_client.refresh_access_token(connection.refresh_token)

        connection.access_token = tokens.access_token
        if tokens.expires_at is not None:
            connection.token_expiry = tokens.expires_at
        if tokens.refresh_token:
            connection.refresh_token = tokens.refresh_token
        self.db.commit()

        logger.info(
            "Stored refreshed Google access token",
            extra={"family_id": connection.family_id},
        )
        return connection.access_token

    async def _calendar_client(self, connection: GoogleConnection) -> GoogleCalendarClient:
        access_token = await self._valid_access_token(connection)
        return GoogleCalendarClient(access_token, transport=self._transport)

    # -------------------------------------------------------------------------
    # OPERATIONS
    # -------------------------------------------------------------------------

    async def create(self, family_id: str, event: Event) -> Optional[str]:
        """
        Create the event in Google.

        Returns:
            The Google event id, or None when skipped or failed
        """
        try:
            connection = self._get_active_connection(family_id)
            if connection is None:
                return None

            client = await self._calendar_client(connection)
            created = await client.insert_event(connection.calendar_id, build_event_body(event))
            external_id = created.get("id")

            logger.info(
                "Mirrored event to Google",
                extra={"family_id": family_id, "event_id": event.id, "google_event_id": external_id},
            )
            return external_id

        except EnvironmentError as e:
            logger.error(f"Google create failed: {e}", extra={"family_id": family_id, "event_id": event.id})
        except Exception as e:
            logger.exception(f"Unexpected error during Google create: {e}")
        return None

    async def update(self, family_id: str, external_id: str, event: Event) -> None:
        """Overwrite the Google copy with the current local fields."""
        if not external_id:
            return
        try:
            connection = self._get_active_connection(family_id)
            if connection is None:
                return

            client = await self._calendar_client(connection)
            await client.update_event(connection.calendar_id, external_id, build_event_body(event))

            logger.info(
                "Updated Google event",
                extra={"family_id": family_id, "google_event_id": external_id},
            )

        except EnvironmentError as e:
            logger.error(f"Google update failed: {e}", extra={"family_id": family_id, "google_event_id": external_id})
        except Exception as e:
            logger.exception(f"Unexpected error during Google update: {e}")

    async def delete(self, family_id: str, external_id: str) -> None:
        """Delete the Google copy; an already missing event counts as deleted."""
        if not external_id:
            return
        try:
            connection = self._get_active_connection(family_id)
            if connection is None:
                return

            client = await self._calendar_client(connection)
            try:
                await client.delete_event(connection.calendar_id, external_id)
            except APIError as e:
                if e.status_code not in GONE_STATUSES:
                    raise
                logger.info(f"Google event already gone ({e.status_code})", extra={"google_event_id": external_id})
                return

            logger.info(
                "Deleted Google event",
                extra={"family_id": family_id, "google_event_id": external_id},
            )

        except EnvironmentError as e:
            logger.error(f"Google delete failed: {e}", extra={"family_id": family_id, "google_event_id": external_id})
        except Exception as e:
            logger.exception(f"Unexpected error during Google delete: {e}")


# ---------------------------------------------------------------------------
# BACKGROUND TASKS
# ---------------------------------------------------------------------------
# Scheduled with BackgroundTasks.add_task(...) after the request committed.

async def run_sync_create(session_factory, family_id: str, event_id: str) -> None:
    """Mirror a newly created event and store the returned Google id."""
    db = session_factory()
    try:
        event = db.get(Event, event_id)
        if event is None:
            return
        external_id = await GoogleCalendarSync(db).create(family_id, event)
        if external_id:
            event.google_event_id = external_id
            db.commit()
    except Exception as e:
        logger.exception(f"Background Google create failed: {e}")
    finally:
        db.close()


async def run_sync_update(session_factory, family_id: str, event_id: str) -> None:
    """Push an edited event; events never mirrored before are created instead."""
    db = session_factory()
    try:
        event = db.get(Event, event_id)
        if event is None:
            return
        sync = GoogleCalendarSync(db)
        if event.google_event_id:
            await sync.update(family_id, event.google_event_id, event)
            return
        external_id = await sync.create(family_id, event)
        if external_id:
            event.google_event_id = external_id
            db.commit()
    except Exception as e:
        logger.exception(f"Background Google update failed: {e}")
    finally:
        db.close()


async def run_sync_delete(session_factory, family_id: str, external_id: str) -> None:
    """Remove the Google copy of a deleted event."""
    if not external_id:
        return
    db = session_factory()
    try:
        await GoogleCalendarSync(db).delete(family_id, external_id)
    except Exception as e:
        logger.exception(f"Background Google delete failed: {e}")
    finally:
        db.close()
