"""
Tests for the recurrence rule codec and the editor-facing schema.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from app.schemas.recurrence import RepeatSettings
from app.services.recurrence import (
    NO_RECURRENCE,
    EndCondition,
    RecurrenceSpec,
    decode_rule,
    encode_rule,
)


class TestDecodeRule:
    """Tests for decode_rule."""

    def test_empty_rule_is_no_recurrence(self):
        assert decode_rule("") == NO_RECURRENCE
        assert decode_rule(None) == NO_RECURRENCE
        assert decode_rule("   ") == NO_RECURRENCE

    def test_weekly_with_days_and_count(self):
        spec = decode_rule("FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;COUNT=5")

        assert spec.mode == "weekly"
        assert spec.interval == 2
        assert spec.weekdays == frozenset({"MO", "WE"})
        assert spec.end == EndCondition.after_count(5)

    def test_until(self):
        spec = decode_rule("FREQ=DAILY;INTERVAL=1;UNTIL=20240630T000000Z")
        assert spec.end == EndCondition.until_date(date(2024, 6, 30))

    def test_count_wins_over_until(self):
        spec = decode_rule("FREQ=DAILY;UNTIL=20240630T000000Z;COUNT=3")
        assert spec.end.kind == "after_count"
        assert spec.end.count == 3

    def test_missing_or_invalid_interval_defaults_to_one(self):
        assert decode_rule("FREQ=MONTHLY").interval == 1
        assert decode_rule("FREQ=MONTHLY;INTERVAL=0").interval == 1
        assert decode_rule("FREQ=MONTHLY;INTERVAL=abc").interval == 1

    def test_rrule_prefix_is_tolerated(self):
        assert decode_rule("RRULE:FREQ=YEARLY").mode == "yearly"

    def test_unknown_freq(self):
        assert decode_rule("FREQ=HOURLY;INTERVAL=1") == NO_RECURRENCE

    def test_byday_ignored_for_non_weekly(self):
        assert decode_rule("FREQ=MONTHLY;BYDAY=MO").weekdays == frozenset()

    def test_unknown_parts_are_dropped(self):
        spec = decode_rule("FREQ=MONTHLY;BYMONTHDAY=15;INTERVAL=1")
        assert spec == RecurrenceSpec(mode="monthly")


class TestEncodeRule:
    """Tests for encode_rule."""

    def test_none_encodes_to_empty(self):
        assert encode_rule(NO_RECURRENCE) == ""

    def test_weekday_order_is_canonical(self):
        spec = RecurrenceSpec(mode="weekly", weekdays=frozenset({"FR", "MO", "WE"}))
        assert encode_rule(spec) == "FREQ=WEEKLY;INTERVAL=1;BYDAY=MO,WE,FR"

    def test_until_format(self):
        spec = RecurrenceSpec(mode="daily", end=EndCondition.until_date(date(2024, 6, 30)))
        assert encode_rule(spec) == "FREQ=DAILY;INTERVAL=1;UNTIL=20240630T000000Z"

    @pytest.mark.parametrize(
        "rule",
        [
            "FREQ=DAILY;INTERVAL=1",
            "FREQ=WEEKLY;INTERVAL=2;BYDAY=TU,TH;COUNT=10",
            "FREQ=MONTHLY;INTERVAL=3;UNTIL=20251231T000000Z",
        ],
    )
    def test_canonical_rules_survive_decode_encode(self, rule):
        assert encode_rule(decode_rule(rule)) == rule


class TestRepeatSettings:
    """Tests for the editor-facing pydantic schema."""

    def test_to_rule(self):
        settings = RepeatSettings(mode="weekly", weekdays=["TU"], end={"kind": "after_count", "count": 4})
        assert settings.to_rule() == "FREQ=WEEKLY;INTERVAL=1;BYDAY=TU;COUNT=4"

    def test_from_rule(self):
        settings = RepeatSettings.from_rule("FREQ=WEEKLY;INTERVAL=1;BYDAY=SU,MO")
        assert settings.mode == "weekly"
        assert settings.weekdays == ["MO", "SU"]
        assert settings.end.kind == "never"

    def test_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            RepeatSettings(mode="daily", interval=0)
