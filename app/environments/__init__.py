"""
Environments Module - external calendar provider integrations.

Architecture Overview:
======================
environments/
├── __init__.py           # Module exports
├── base.py               # Provider contract, token bundle, exceptions
└── google/               # Google integration
    ├── auth/             # OAuth code exchange and refresh grant
    └── calendar/         # Calendar list + event writes for sync

Design Principles:
==================
1. Provider clients only speak HTTP and raise the exceptions from base.py
2. Token storage and refresh policy live in app/services/google_sync.py
3. Every client takes an optional httpx transport so tests stay offline
"""

from app.environments.base import (
    CalendarProvider,
    OAuthTokens,
    EnvironmentError,
    AuthenticationError,
    TokenExpiredError,
    APIError,
)

__all__ = [
    "CalendarProvider",
    "OAuthTokens",
    "EnvironmentError",
    "AuthenticationError",
    "TokenExpiredError",
    "APIError",
]
