"""
Google OAuth Schemas - scope constants and the token endpoint response.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, List
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# OAUTH SCOPE CONSTANTS
# ---------------------------------------------------------------------------
# Reference: https://developers.google.com/identity/protocols/oauth2/scopes

# Calendar scopes - list calendars for the picker, write events for sync
CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",  # calendarList
    "https://www.googleapis.com/auth/calendar.events",    # insert/patch/delete events
]


# ---------------------------------------------------------------------------
# TOKEN RESPONSES
# ---------------------------------------------------------------------------

class GoogleTokenResponse(BaseModel):
    """
    Response from Google's token endpoint, for both the code exchange and
    the refresh grant.

    Example response from Google:
    {
        "access_token": "ya29.a0AfB_byC...",
        "expires_in": 3599,
        "refresh_token": "1//0eXyz...",
        "scope": "https://www.googleapis.com/auth/calendar.events",
        "token_type": "Bearer"
    }

    refresh_token is only present on the first consent (or with prompt=consent).
    """
    access_token: str = Field(..., description="OAuth access token")
    token_type: str = Field(default="Bearer", description="Token type (usually Bearer)")
    expires_in: Optional[int] = Field(None, description="Seconds until expiration")
    refresh_token: Optional[str] = Field(None, description="Refresh token for renewal")
    scope: Optional[str] = Field(None, description="Space-separated scopes granted")

    def get_scopes_list(self) -> List[str]:
        """Convert space-separated scope string to list."""
        if self.scope:
            return self.scope.split()
        return []

    def get_expires_at(self, now: Optional[datetime] = None) -> datetime:
        """Absolute expiry; a missing expires_in is treated as one hour."""
        now = now or datetime.now(timezone.utc)
        return now + timedelta(seconds=self.expires_in or 3600)
