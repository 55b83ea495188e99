"""
Google OAuth Client - authorization code flow and refresh grant.

Used by the /auth/google routes to connect a family's Google account and
by the sync adapter to keep the access token fresh.

OAuth 2.0 Flow:
===============
1. get_authorization_url() -> user is redirected to Google's consent screen
2. exchange_code_for_tokens() -> called from the callback
3. refresh_access_token() -> before API calls once the token is near expiry
4. revoke_token() -> when the family disconnects

References:
===========
- OAuth 2.0: https://developers.google.com/identity/protocols/oauth2
- Token endpoint: https://oauth2.googleapis.com/token
"""

import logging
import secrets
from typing import Optional
from urllib.parse import urlencode

import httpx

from app.core.config import settings
from app.environments.base import (
    CalendarProvider,
    OAuthTokens,
    AuthenticationError,
    TokenExpiredError,
)
from app.environments.google.auth.schemas import (
    GoogleTokenResponse,
    CALENDAR_SCOPES,
)


logger = logging.getLogger("familyhub.environments.google.auth")


class GoogleAuthClient(CalendarProvider):
    """
    Google OAuth 2.0 client.

    Example Usage:
        client = GoogleAuthClient()

        # Step 1: consent URL
        url = client.get_authorization_url(state=GoogleAuthClient.generate_state())

        # Step 2: in the callback
        tokens = await client.exchange_code_for_tokens(code="4/0Ab...")

        # Later, before an API call
        tokens = await client.refresh_access_token(connection.refresh_token)
    """

    provider_name = "google"

    # Google OAuth endpoints
    AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    REVOKE_URL = "https://oauth2.googleapis.com/revoke"

    TIMEOUT_SECONDS = 30.0

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            client_id: OAuth Client ID (defaults to settings)
            client_secret: OAuth Client Secret (defaults to settings)
            redirect_uri: Callback URL (defaults to settings)
            transport: Optional httpx transport (tests)
        """
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self.redirect_uri = redirect_uri or settings.GOOGLE_REDIRECT_URI
        self._transport = transport

        if not self.client_id or not self.client_secret:
            logger.warning(
                "Google OAuth not configured. Set GOOGLE_CLIENT_ID and "
                "GOOGLE_CLIENT_SECRET in environment variables."
            )

    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.TIMEOUT_SECONDS, transport=self._transport)

    # -------------------------------------------------------------------------
    # AUTHORIZATION URL
    # -------------------------------------------------------------------------

    def get_authorization_url(self, state: str, redirect_uri: Optional[str] = None) -> str:
        """
        Build the Google consent URL for the calendar scopes.

        access_type=offline and prompt=consent make Google return a refresh
        token even when the account was connected before.
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri or self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(CALENDAR_SCOPES),
            "state": state,
            "access_type": "offline",
            "prompt": "consent",
        }

        logger.info("Generated Google auth URL", extra={"scopes": CALENDAR_SCOPES})

        return f"{self.AUTHORIZATION_URL}?{urlencode(params)}"

    # -------------------------------------------------------------------------
    # TOKEN EXCHANGE
    # -------------------------------------------------------------------------

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            error_data = response.json() if response.content else {}
        except ValueError:
            error_data = {}
        return error_data.get("error_description") or error_data.get("error") or response.text

    async def exchange_code_for_tokens(self, code: str, redirect_uri: Optional[str] = None) -> OAuthTokens:
        """
        Exchange the callback code for access and refresh tokens.

        Raises:
            AuthenticationError: If Google rejects the code or is unreachable
        """
        token_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri or self.redirect_uri,
        }

        logger.info("Exchanging authorization code for tokens")

        async with self._client() as client:
            try:
                response = await client.post(self.TOKEN_URL, data=token_data)
            except httpx.RequestError as e:
                logger.error(f"Network error during token exchange: {e}")
                raise AuthenticationError(f"Network error: {e}")

        if response.status_code != 200:
            error_msg = self._error_message(response)
            logger.error(f"Token exchange failed: {error_msg}")
            raise AuthenticationError(f"Token exchange failed: {error_msg}")

        token_response = GoogleTokenResponse(**response.json())

        logger.info(
            "Obtained Google tokens",
            extra={
                "has_refresh_token": token_response.refresh_token is not None,
                "expires_in": token_response.expires_in,
            },
        )

        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.refresh_token,
            expires_at=token_response.get_expires_at(),
            scopes=token_response.get_scopes_list(),
        )

    # -------------------------------------------------------------------------
    # TOKEN REFRESH
    # -------------------------------------------------------------------------

    async def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        """
        Use the refresh token to get a new access token.

        Returns:
            OAuthTokens; refresh_token is the old one unless Google rotated it

        Raises:
            TokenExpiredError: If the refresh token is invalid, revoked or missing
        """
        if not refresh_token:
            raise TokenExpiredError("No refresh token stored")

        refresh_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

        logger.info("Refreshing access token")

        async with self._client() as client:
            try:
                response = await client.post(self.TOKEN_URL, data=refresh_data)
            except httpx.RequestError as e:
                logger.error(f"Network error during token refresh: {e}")
                raise TokenExpiredError(f"Network error: {e}")

        if response.status_code != 200:
            error_msg = self._error_message(response)
            logger.error(f"Token refresh failed: {error_msg}")
            raise TokenExpiredError(f"Token refresh failed: {error_msg}")

        token_response = GoogleTokenResponse(**response.json())

        logger.info("Refreshed access token", extra={"expires_in": token_response.expires_in})

        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.refresh_token or refresh_token,
            expires_at=token_response.get_expires_at(),
            scopes=token_response.get_scopes_list(),
        )

    # -------------------------------------------------------------------------
    # TOKEN REVOCATION
    # -------------------------------------------------------------------------

    async def revoke_token(self, token: str) -> bool:
        """
        Revoke a token at Google. Failures are logged and reported as False,
        the local connection is removed either way.
        """
        logger.info("Revoking Google token")

        async with self._client() as client:
            try:
                response = await client.post(self.REVOKE_URL, params={"token": token})
            except httpx.RequestError as e:
                logger.error(f"Network error during token revocation: {e}")
                return False

        if response.status_code != 200:
            logger.warning(f"Token revocation returned status {response.status_code}")
            return False
        return True

    # -------------------------------------------------------------------------
    # UTILITY METHODS
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_state() -> str:
        """Random URL-safe CSRF token for the state parameter."""
        return secrets.token_urlsafe(32)
