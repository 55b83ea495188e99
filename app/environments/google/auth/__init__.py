"""
Google Auth Module - OAuth 2.0 for the Google Calendar connection.

Connection flow:
================
1. Family admin clicks "Connect Google Calendar"
2. Backend builds the consent URL with the calendar scopes
3. Google redirects back with an authorization code
4. Backend exchanges the code and stores a GoogleConnection (calendar "pending")
5. Admin picks the target calendar, sync starts with the next event change
"""

from app.environments.google.auth.client import GoogleAuthClient
from app.environments.google.auth.schemas import (
    GoogleTokenResponse,
    CALENDAR_SCOPES,
)

__all__ = [
    "GoogleAuthClient",
    "GoogleTokenResponse",
    "CALENDAR_SCOPES",
]
