"""
Meal events - shows planned meals on the calendar.

Each meal plan becomes a read-only, one-hour pseudo-event at a fixed local
time of day for its meal type. Unknown meal types are placed at dinner time.
"""

from datetime import datetime, time, timedelta, tzinfo
from typing import Iterable, List, Optional

from app.models.meal_plan import MealPlan
from app.schemas.event import CalendarEvent, EventSource


MEAL_DURATION = timedelta(hours=1)

# meal_type -> (label, local start time)
MEAL_SLOTS = {
    "breakfast": ("Breakfast", time(8, 0)),
    "lunch": ("Lunch", time(12, 30)),
    "snack": ("Snack", time(15, 0)),
    "dinner": ("Dinner", time(18, 15)),
}
DEFAULT_MEAL_TYPE = "dinner"


def meal_plan_to_event(plan: MealPlan, tz: Optional[tzinfo] = None) -> CalendarEvent:
    """
    Convert one meal plan into a CalendarEvent.

    Args:
        plan: The stored meal plan
        tz: Zone the meal times are expressed in (host local when None)
    """
    label, start_at = MEAL_SLOTS.get(plan.meal_type, MEAL_SLOTS[DEFAULT_MEAL_TYPE])

    naive_start = datetime.combine(plan.date, start_at)
    start = naive_start.replace(tzinfo=tz) if tz is not None else naive_start.astimezone()

    title = f"{label}: {plan.food_name}" if plan.food_name else label

    return CalendarEvent(
        id=f"meal-{plan.id}",
        title=title,
        start_time=start,
        end_time=start + MEAL_DURATION,
        notes=plan.notes or "",
        assignee_ids=list(plan.assignee_ids or []),
        source=EventSource.MEAL,
    )


def meal_plans_to_events(plans: Iterable[MealPlan], tz: Optional[tzinfo] = None) -> List[CalendarEvent]:
    """Convert meal plans into CalendarEvents, keeping their order."""
    return [meal_plan_to_event(plan, tz) for plan in plans]
