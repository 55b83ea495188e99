"""
iCal Text Parser - extracts VEVENTs from raw text/calendar content.

Remote feeds are untrusted and frequently sloppy, so this parser never
raises: malformed lines, unknown properties and unparseable values are
skipped. Only the handful of properties the calendar views need are read.

Supported:
- Line unfolding (CRLF/LF followed by a space or tab)
- UID, SUMMARY, DTSTART, DTEND, LOCATION, DESCRIPTION
- DATE values (YYYYMMDD) as all-day at UTC midnight
- DATE-TIME values, floating (host local time) or UTC (trailing Z)

Not supported:
- TZID parameters (ignored, the value is read as floating)
- RRULE / EXDATE expansion (a recurring VEVENT yields its first instance only)

Usage:
    events = parse_ical(response_text)
    for ev in events:
        print(ev.uid, ev.summary, ev.dtstart)
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional


logger = logging.getLogger("familyhub.services.ical_parser")


DEFAULT_SUMMARY = "Untitled"
DEFAULT_DURATION = timedelta(hours=1)

_DATE_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_DATETIME_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})(Z?)$")


@dataclass
class ParsedVEvent:
    """One VEVENT read from a feed. Times are aware UTC datetimes."""
    uid: str
    summary: str
    dtstart: datetime
    dtend: datetime
    location: str = ""
    description: str = ""


# ---------------------------------------------------------------------------
# LOW-LEVEL HELPERS
# ---------------------------------------------------------------------------

def unfold_lines(raw_text: str) -> List[str]:
    """
    Normalize line endings and join folded continuation lines.

    A line break followed by one space or tab is removed along with that
    whitespace character.
    """
    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"\n[ \t]", "", text)
    return text.split("\n")


def unescape_text(value: str) -> str:
    """Undo iCal TEXT escaping for \\n, \\, , \\\\ and \\; (applied in that order)."""
    return (
        value.replace("\\n", "\n")
        .replace("\\N", "\n")
        .replace("\\,", ",")
        .replace("\\\\", "\\")
        .replace("\\;", ";")
    )


def parse_ical_datetime(value: str) -> Optional[datetime]:
    """
    Parse a DATE or DATE-TIME value into an aware UTC datetime.

    Returns:
        The instant, or None if the value is not in a supported form
    """
    value = value.strip()

    try:
        match = _DATE_RE.match(value)
        if match:
            year, month, day = (int(part) for part in match.groups())
            return datetime(year, month, day, tzinfo=timezone.utc)

        match = _DATETIME_RE.match(value)
        if match:
            year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
            if match.group(7) == "Z":
                return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
            # Floating: wall-clock time in the host's local zone
            local = datetime(year, month, day, hour, minute, second).astimezone()
            return local.astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError):
        # e.g. month 13, Feb 30, or year 9999 shifted past the datetime range
        return None

    return None


def _split_property(line: str):
    """
    Split "NAME;PARAM=X:VALUE" into ("NAME", "VALUE").

    Returns None for lines without a colon.
    """
    if ":" not in line:
        return None
    head, value = line.split(":", 1)
    name = head.split(";", 1)[0].strip().upper()
    if not name:
        return None
    return name, value


# ---------------------------------------------------------------------------
# PARSER
# ---------------------------------------------------------------------------

def _build_event(props: dict) -> Optional[ParsedVEvent]:
    dtstart = parse_ical_datetime(props["DTSTART"]) if "DTSTART" in props else None
    if dtstart is None:
        return None

    dtend = parse_ical_datetime(props["DTEND"]) if "DTEND" in props else None
    if dtend is None:
        try:
            dtend = dtstart + DEFAULT_DURATION
        except OverflowError:
            return None

    summary = unescape_text(props.get("SUMMARY", "")).strip()

    return ParsedVEvent(
        uid=props.get("UID", "").strip(),
        summary=summary or DEFAULT_SUMMARY,
        dtstart=dtstart,
        dtend=dtend,
        location=unescape_text(props.get("LOCATION", "")),
        description=unescape_text(props.get("DESCRIPTION", "")),
    )


_WANTED = ("UID", "SUMMARY", "DTSTART", "DTEND", "LOCATION", "DESCRIPTION")


def parse_ical(raw_text: str) -> List[ParsedVEvent]:
    """
    Extract all VEVENTs from iCal text.

    Args:
        raw_text: Body of a text/calendar response (any line endings)

    Returns:
        Parsed events in document order; VEVENTs without a usable DTSTART
        are dropped
    """
    if not raw_text:
        return []

    events: List[ParsedVEvent] = []
    props: Optional[dict] = None
    # Depth of components nested inside the current VEVENT (VALARM etc.)
    nested = 0
    dropped = 0

    for line in unfold_lines(raw_text):
        if not line.strip():
            continue

        parsed = _split_property(line)
        if parsed is None:
            continue
        name, value = parsed

        if name == "BEGIN":
            component = value.strip().upper()
            if props is None:
                if component == "VEVENT":
                    props = {}
                    nested = 0
            else:
                nested += 1
            continue

        if name == "END":
            if props is None:
                continue
            if nested > 0:
                nested -= 1
                continue
            if value.strip().upper() == "VEVENT":
                event = _build_event(props)
                if event is not None:
                    events.append(event)
                else:
                    dropped += 1
                props = None
            continue

        if props is None or nested > 0:
            continue

        # First occurrence wins for duplicated properties
        if name in _WANTED and name not in props:
            props[name] = value

    if dropped:
        logger.debug(f"Dropped {dropped} VEVENT(s) without a usable DTSTART")

    return events
