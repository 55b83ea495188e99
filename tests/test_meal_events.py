"""
Tests for turning meal plans into calendar pseudo-events.
"""

from datetime import date, datetime, timezone

import pytest

from app.models.meal_plan import MealPlan
from app.schemas.event import EventSource
from app.services.meal_events import meal_plan_to_event, meal_plans_to_events


def _plan(meal_type: str, food_name: str = "", plan_id: str = "p1") -> MealPlan:
    return MealPlan(
        id=plan_id,
        family_id="fam",
        date=date(2024, 3, 11),
        meal_type=meal_type,
        food_name=food_name,
        notes="",
        assignee_ids=["m1"],
    )


class TestMealPlanToEvent:

    @pytest.mark.parametrize(
        "meal_type, hour, minute",
        [
            ("breakfast", 8, 0),
            ("lunch", 12, 30),
            ("snack", 15, 0),
            ("dinner", 18, 15),
        ],
    )
    def test_fixed_times(self, meal_type, hour, minute):
        event = meal_plan_to_event(_plan(meal_type), tz=timezone.utc)
        assert event.start_time == datetime(2024, 3, 11, hour, minute, tzinfo=timezone.utc)
        assert (event.end_time - event.start_time).total_seconds() == 3600

    def test_unknown_type_uses_dinner_slot(self):
        event = meal_plan_to_event(_plan("brunch"), tz=timezone.utc)
        assert event.start_time.hour == 18
        assert event.title == "Dinner"

    def test_title_and_metadata(self):
        event = meal_plan_to_event(_plan("lunch", "Soup"), tz=timezone.utc)
        assert event.id == "meal-p1"
        assert event.title == "Lunch: Soup"
        assert event.source == EventSource.MEAL
        assert event.assignee_ids == ["m1"]
        assert not event.is_all_day()

    def test_title_without_food(self):
        assert meal_plan_to_event(_plan("breakfast"), tz=timezone.utc).title == "Breakfast"

    def test_order_is_kept(self):
        events = meal_plans_to_events(
            [_plan("dinner", plan_id="a"), _plan("breakfast", plan_id="b")],
            tz=timezone.utc,
        )
        assert [event.id for event in events] == ["meal-a", "meal-b"]
