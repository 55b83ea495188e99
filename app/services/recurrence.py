"""
Recurrence Rule Codec - converts between stored rule strings and the
structured form used by the event editor.

Only a restricted RRULE subset is written by this app:

    FREQ=<DAILY|WEEKLY|MONTHLY|YEARLY>;INTERVAL=<n>[;BYDAY=MO,WE][;COUNT=<n>|;UNTIL=<YYYYMMDD>T000000Z]

Rules are never expanded into occurrences here. Hand-authored rules with
other parts (BYMONTHDAY, BYSETPOS, ...) decode without error; the unknown
parts are simply dropped from the structured form.

Usage:
    spec = decode_rule("FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;COUNT=5")
    spec.mode          # "weekly"
    spec.weekdays      # frozenset({"MO", "WE"})
    encode_rule(spec)  # "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;COUNT=5"
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Optional


logger = logging.getLogger("familyhub.services.recurrence")


MODES = ("none", "daily", "weekly", "monthly", "yearly")

# Canonical BYDAY order used when encoding
WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")


# ---------------------------------------------------------------------------
# STRUCTURED FORM
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EndCondition:
    """
    When a repeating event stops.

    kind is one of "never", "after_count" (count set) or "until" (until set).
    """
    kind: str = "never"
    count: Optional[int] = None
    until: Optional[date] = None

    @classmethod
    def never(cls) -> "EndCondition":
        return cls()

    @classmethod
    def after_count(cls, count: int) -> "EndCondition":
        return cls(kind="after_count", count=count)

    @classmethod
    def until_date(cls, until: date) -> "EndCondition":
        return cls(kind="until", until=until)


@dataclass(frozen=True)
class RecurrenceSpec:
    """Editor-facing recurrence settings."""
    mode: str = "none"
    interval: int = 1
    weekdays: FrozenSet[str] = field(default_factory=frozenset)
    end: EndCondition = field(default_factory=EndCondition)

    def is_repeating(self) -> bool:
        return self.mode != "none"


NO_RECURRENCE = RecurrenceSpec()


# ---------------------------------------------------------------------------
# DECODE
# ---------------------------------------------------------------------------

def _split_parts(rule: str) -> dict:
    """Split "A=1;B=2" into {"A": "1", "B": "2"}; pieces without "=" are skipped."""
    parts = {}
    for piece in rule.split(";"):
        key, sep, value = piece.partition("=")
        key = key.strip().upper()
        if not sep or not key:
            continue
        parts[key] = value.strip()
    return parts


def _parse_positive_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError:
        return None
    return number if number > 0 else None


def _parse_until(value: str) -> Optional[date]:
    digits = value[:8]
    if len(digits) != 8 or not digits.isdigit():
        return None
    try:
        return date(int(digits[0:4]), int(digits[4:6]), int(digits[6:8]))
    except ValueError:
        return None


def decode_rule(rule: Optional[str]) -> RecurrenceSpec:
    """
    Parse a stored rule string into a RecurrenceSpec.

    Never raises. An empty rule, or one without a FREQ this app understands,
    yields NO_RECURRENCE.

    Args:
        rule: e.g. "FREQ=WEEKLY;INTERVAL=1;BYDAY=MO,WE" (an "RRULE:" prefix is tolerated)

    Returns:
        The structured form
    """
    if not rule or not rule.strip():
        return NO_RECURRENCE

    text = rule.strip()
    if text.upper().startswith("RRULE:"):
        text = text[len("RRULE:"):]

    parts = _split_parts(text)

    mode = parts.get("FREQ", "").lower()
    if mode not in MODES or mode == "none":
        logger.debug(f"No usable FREQ in recurrence rule: {rule!r}")
        return NO_RECURRENCE

    interval = _parse_positive_int(parts.get("INTERVAL")) or 1

    weekdays: FrozenSet[str] = frozenset()
    if mode == "weekly" and parts.get("BYDAY"):
        weekdays = frozenset(
            code.strip().upper()
            for code in parts["BYDAY"].split(",")
            if code.strip().upper() in WEEKDAY_CODES
        )

    # COUNT is checked first and wins if a rule carries both
    end = EndCondition.never()
    count = _parse_positive_int(parts.get("COUNT"))
    if count is not None:
        end = EndCondition.after_count(count)
    elif parts.get("UNTIL"):
        until = _parse_until(parts["UNTIL"])
        if until is not None:
            end = EndCondition.until_date(until)

    return RecurrenceSpec(mode=mode, interval=interval, weekdays=weekdays, end=end)


# ---------------------------------------------------------------------------
# ENCODE
# ---------------------------------------------------------------------------

def encode_rule(spec: RecurrenceSpec) -> str:
    """
    Build the stored rule string for a RecurrenceSpec.

    Returns:
        "" for mode "none", otherwise a rule in the restricted format
    """
    if spec.mode not in MODES or spec.mode == "none":
        return ""

    interval = spec.interval if spec.interval and spec.interval > 0 else 1
    rule = f"FREQ={spec.mode.upper()};INTERVAL={interval}"

    if spec.mode == "weekly" and spec.weekdays:
        codes = [code for code in WEEKDAY_CODES if code in spec.weekdays]
        if codes:
            rule += ";BYDAY=" + ",".join(codes)

    if spec.end.kind == "after_count" and spec.end.count:
        rule += f";COUNT={spec.end.count}"
    elif spec.end.kind == "until" and spec.end.until is not None:
        rule += f";UNTIL={spec.end.until.strftime('%Y%m%d')}T000000Z"

    return rule
