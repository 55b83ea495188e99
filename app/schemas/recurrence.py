"""
Repeat schemas - the structured recurrence form exchanged with the event editor.

The database only stores the rule string; these schemas are converted to
and from app.services.recurrence.RecurrenceSpec at the API boundary.
"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.services.recurrence import (
    EndCondition,
    RecurrenceSpec,
    WEEKDAY_CODES,
    decode_rule,
    encode_rule,
)


RepeatMode = Literal["none", "daily", "weekly", "monthly", "yearly"]
EndKind = Literal["never", "after_count", "until"]


class RepeatEnd(BaseModel):
    """
    When the series stops.

    Example:
    {"kind": "after_count", "count": 10}
    """
    kind: EndKind = "never"
    count: Optional[int] = Field(None, ge=1)
    until: Optional[date] = None


class RepeatSettings(BaseModel):
    """
    Editor form of a recurrence rule.

    Example request/response fragment:
    {
        "mode": "weekly",
        "interval": 2,
        "weekdays": ["MO", "WE"],
        "end": {"kind": "until", "until": "2026-06-30"}
    }
    """
    mode: RepeatMode = "none"
    interval: int = Field(1, ge=1)

    # weekdays: Two-letter codes, only meaningful for weekly
    weekdays: List[str] = Field(default_factory=list)

    end: RepeatEnd = Field(default_factory=RepeatEnd)

    def to_spec(self) -> RecurrenceSpec:
        codes = frozenset(code.upper() for code in self.weekdays if code.upper() in WEEKDAY_CODES)

        if self.end.kind == "after_count" and self.end.count:
            end = EndCondition.after_count(self.end.count)
        elif self.end.kind == "until" and self.end.until is not None:
            end = EndCondition.until_date(self.end.until)
        else:
            end = EndCondition.never()

        return RecurrenceSpec(mode=self.mode, interval=self.interval, weekdays=codes, end=end)

    def to_rule(self) -> str:
        return encode_rule(self.to_spec())

    @classmethod
    def from_spec(cls, spec: RecurrenceSpec) -> "RepeatSettings":
        return cls(
            mode=spec.mode,
            interval=spec.interval,
            weekdays=[code for code in WEEKDAY_CODES if code in spec.weekdays],
            end=RepeatEnd(kind=spec.end.kind, count=spec.end.count, until=spec.end.until),
        )

    @classmethod
    def from_rule(cls, rule: Optional[str]) -> "RepeatSettings":
        return cls.from_spec(decode_rule(rule))
