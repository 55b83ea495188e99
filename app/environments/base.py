"""
Base classes and errors for external calendar provider integrations.

Only Google is implemented today, but the sync adapter and the OAuth routes
depend on these provider-neutral pieces:

- Exception hierarchy raised by provider clients and caught by callers
- OAuthTokens, the token bundle passed from the OAuth flow to storage
- CalendarProvider, the contract an OAuth provider client fulfils
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, List, Any


# ---------------------------------------------------------------------------
# CUSTOM EXCEPTIONS
# ---------------------------------------------------------------------------
# Provider clients raise these; google_sync catches and logs them, routes
# turn them into HTTP errors.


class EnvironmentError(Exception):
    """Base exception for all provider-related errors."""
    pass


class AuthenticationError(EnvironmentError):
    """Raised when the authorization code exchange fails."""
    pass


class TokenExpiredError(EnvironmentError):
    """Raised when an access token cannot be refreshed."""
    pass


class APIError(EnvironmentError):
    """Raised when a provider API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


# ---------------------------------------------------------------------------
# DATA STRUCTURES
# ---------------------------------------------------------------------------


@dataclass
class OAuthTokens:
    """
    Token data returned by a provider.

    refresh_token is None when the provider did not issue a new one
    (Google only sends it on first consent).
    """
    access_token: str
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    scopes: Optional[List[str]] = None


# ---------------------------------------------------------------------------
# PROVIDER CONTRACT
# ---------------------------------------------------------------------------


class CalendarProvider(ABC):
    """
    Abstract OAuth client for a calendar provider.

    Subclasses build the consent URL, exchange the callback code, refresh
    access tokens and revoke grants.
    """

    # Identifier for logs and storage (e.g. "google")
    provider_name: str = ""

    @abstractmethod
    def get_authorization_url(self, state: str, redirect_uri: Optional[str] = None) -> str:
        """
        Build the consent URL the user is redirected to.

        Args:
            state: CSRF token echoed back to the callback
            redirect_uri: Override the configured callback URL
        """
        pass

    @abstractmethod
    async def exchange_code_for_tokens(self, code: str, redirect_uri: Optional[str] = None) -> OAuthTokens:
        """
        Exchange an authorization code for tokens.

        Raises:
            AuthenticationError: If the exchange fails
        """
        pass

    @abstractmethod
    async def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        """
        Obtain a fresh access token.

        Raises:
            TokenExpiredError: If the refresh token is invalid or revoked
        """
        pass

    @abstractmethod
    async def revoke_token(self, token: str) -> bool:
        """Revoke a token; returns True on success."""
        pass
