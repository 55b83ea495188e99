"""
Google Calendar API Client - writes mirrored events and lists calendars.

Key Features:
=============
1. List the user's calendars (for choosing the sync target)
2. Insert, replace and delete single events in a chosen calendar
3. Uniform error handling: every failure is raised as APIError with the
   HTTP status, so callers can decide which statuses are acceptable

API Reference:
==============
- Events API: https://developers.google.com/calendar/api/v3/reference/events
- CalendarList API: https://developers.google.com/calendar/api/v3/reference/calendarList

Usage Example:
==============
    client = GoogleCalendarClient(access_token="ya29.xxx")
    calendars = await client.list_calendars()
    created = await client.insert_event("family@group.calendar.google.com", body)
    print(created["id"])
"""

import logging
from typing import Iterable, List, Optional
from urllib.parse import quote

import httpx

from app.environments.base import APIError
from app.environments.google.calendar.schemas import (
    CalendarInfo,
    CalendarListResponse,
    GoogleEventBody,
)


logger = logging.getLogger("familyhub.environments.google.calendar")


class GoogleCalendarClient:
    """
    Google Calendar API client bound to one access token.

    Attributes:
        access_token: Google OAuth access token with calendar scopes
    """

    # Google Calendar API base URL
    BASE_URL = "https://www.googleapis.com/calendar/v3"

    TIMEOUT_SECONDS = 30.0

    def __init__(self, access_token: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            access_token: Valid Google OAuth access token
            transport: Optional httpx transport (tests)
        """
        self.access_token = access_token
        self._transport = transport

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    def _get_headers(self) -> dict:
        """Get authorization headers for API requests."""
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
        ok_statuses: Iterable[int] = (200,),
    ) -> Optional[dict]:
        """
        Make an authenticated request to the Calendar API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint path (e.g., "/calendars/primary/events")
            params: Query parameters
            json: JSON body
            ok_statuses: Statuses treated as success

        Returns:
            Parsed JSON response, or None for empty bodies

        Raises:
            APIError: On network errors and any status not in ok_statuses
        """
        url = f"{self.BASE_URL}{endpoint}"

        async with httpx.AsyncClient(timeout=self.TIMEOUT_SECONDS, transport=self._transport) as client:
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    params=params,
                    json=json,
                )
            except httpx.RequestError as e:
                logger.error(f"Network error in Calendar API: {e}")
                raise APIError(f"Network error: {e}")

        if response.status_code not in ok_statuses:
            if response.status_code == 401:
                message = "Unauthorized - access token may be expired"
            elif response.status_code == 403:
                message = "Forbidden - calendar scope may not be granted"
            else:
                message = f"API request failed: {response.text}"
            logger.error(f"Calendar API error: {response.status_code} {method} {endpoint}")
            raise APIError(message, status_code=response.status_code, response=response.text)

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _events_path(calendar_id: str, event_id: Optional[str] = None) -> str:
        path = f"/calendars/{quote(calendar_id, safe='')}/events"
        if event_id:
            path += f"/{quote(event_id, safe='')}"
        return path

    # -------------------------------------------------------------------------
    # CALENDAR LIST
    # -------------------------------------------------------------------------

    async def list_calendars(self, max_results: int = 100) -> List[CalendarInfo]:
        """
        List calendars the user has access to.

        Returns:
            CalendarInfo entries in the order Google returns them
        """
        response_data = await self._make_request(
            method="GET",
            endpoint="/users/me/calendarList",
            params={"maxResults": min(max_results, 250)},
        )

        calendar_list = CalendarListResponse(**(response_data or {}))

        logger.info(f"Found {len(calendar_list.items)} calendars")

        return calendar_list.items

    # -------------------------------------------------------------------------
    # EVENTS
    # -------------------------------------------------------------------------

    async def insert_event(self, calendar_id: str, body: GoogleEventBody) -> dict:
        """
        Create an event.

        Returns:
            The created event resource (its "id" is the external event id)
        """
        logger.info("Creating calendar event", extra={"calendar_id": calendar_id})

        created = await self._make_request(
            method="POST",
            endpoint=self._events_path(calendar_id),
            json=body.to_api(),
        )
        return created or {}

    async def update_event(self, calendar_id: str, event_id: str, body: GoogleEventBody) -> dict:
        """
        Replace an existing event with body.

        Fields missing from body are cleared on the Google side.
        """
        logger.info(
            "Updating calendar event",
            extra={"calendar_id": calendar_id, "event_id": event_id},
        )

        updated = await self._make_request(
            method="PUT",
            endpoint=self._events_path(calendar_id, event_id),
            json=body.to_api(),
        )
        return updated or {}

    async def delete_event(self, calendar_id: str, event_id: str) -> None:
        """
        Delete an event.

        Raises:
            APIError: Including 404/410 when the event is already gone
        """
        logger.info(
            "Deleting calendar event",
            extra={"calendar_id": calendar_id, "event_id": event_id},
        )

        # 204 No Content is the normal success response
        await self._make_request(
            method="DELETE",
            endpoint=self._events_path(calendar_id, event_id),
            ok_statuses=(200, 204),
        )
