"""
iCal Fetch Cache - downloads remote iCal feeds and reuses the body for a
short time.

Every calendar view request fans out to all configured feeds, and the
views poll. Without a cache each poll would hit every school, club and
holiday server again, so bodies are kept for ICAL_CACHE_TTL_SECONDS
(5 minutes by default), keyed by the exact URL string.

Behavior:
- Hit (age < ttl): cached text is returned, no network I/O
- Miss or expired: HTTP GET with a fixed timeout
- Non-2xx status, timeout or transport error: ICalFetchError, cache untouched
- Concurrent misses for the same URL may both fetch; the last write wins

The cache is the only piece of state shared across requests. One
process-wide instance lives in this module (see get_ical_cache) and the
routers receive it via FastAPI dependency, so tests can swap it.

Usage:
    cache = ICalFetchCache(ttl_seconds=300, timeout_seconds=10)
    text = await cache.fetch("https://example.com/school.ics")
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import httpx

from app.core.config import settings


logger = logging.getLogger("familyhub.services.ical_cache")


class ICalFetchError(Exception):
    """Raised when a feed cannot be downloaded."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


@dataclass
class CacheEntry:
    text: str
    fetched_at: float


class ICalFetchCache:
    """
    TTL cache in front of remote iCal downloads.

    Args:
        ttl_seconds: How long a body stays valid
        timeout_seconds: Timeout for one download
        transport: Optional httpx transport (tests pass httpx.MockTransport)
        clock: Returns the current time in seconds (defaults to time.monotonic)
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        timeout_seconds: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.ttl_seconds = ttl_seconds
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._clock = clock or time.monotonic
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Drop every cached body."""
        self._entries.clear()

    def _get_fresh(self, url: str) -> Optional[str]:
        entry = self._entries.get(url)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at < self.ttl_seconds:
            return entry.text
        return None

    async def fetch(self, url: str) -> str:
        """
        Return the body of the feed at url, from cache when fresh.

        Raises:
            ICalFetchError: On timeout, transport failure or non-2xx status
        """
        cached = self._get_fresh(url)
        if cached is not None:
            logger.debug(f"iCal cache hit: {url}")
            return cached

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            raise ICalFetchError(url, f"Timed out after {self.timeout_seconds}s") from e
        except httpx.HTTPError as e:
            raise ICalFetchError(url, f"Request failed: {e}") from e

        if not response.is_success:
            raise ICalFetchError(
                url,
                f"Feed returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        text = response.text
        self._entries[url] = CacheEntry(text=text, fetched_at=self._clock())

        logger.info(
            f"Fetched iCal feed ({len(text)} chars)",
            extra={"url": url, "status_code": response.status_code},
        )
        return text


# ---------------------------------------------------------------------------
# PROCESS-WIDE INSTANCE
# ---------------------------------------------------------------------------

_ical_cache = ICalFetchCache(
    ttl_seconds=settings.ICAL_CACHE_TTL_SECONDS,
    timeout_seconds=settings.ICAL_FETCH_TIMEOUT_SECONDS,
)


def get_ical_cache() -> ICalFetchCache:
    """FastAPI dependency returning the shared cache."""
    return _ical_cache
