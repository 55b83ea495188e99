"""
Google Environment Module - Google Calendar connection.

Usage:
======
    from app.environments.google import GoogleAuthClient, GoogleCalendarClient

    # OAuth flow
    auth_client = GoogleAuthClient()
    auth_url = auth_client.get_authorization_url(state="...")

    # After callback
    tokens = await auth_client.exchange_code_for_tokens(code)

    # Calendar picker
    calendar = GoogleCalendarClient(access_token=tokens.access_token)
    calendars = await calendar.list_calendars()
"""

from app.environments.google.auth import GoogleAuthClient, CALENDAR_SCOPES
from app.environments.google.calendar import GoogleCalendarClient, CalendarInfo, GoogleEventBody

__all__ = [
    "GoogleAuthClient",
    "GoogleCalendarClient",
    "CalendarInfo",
    "GoogleEventBody",
    "CALENDAR_SCOPES",
]
