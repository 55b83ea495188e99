"""
Meal plan schemas - one planned meal per day and meal type.
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class MealPlanCreate(BaseModel):
    """
    Schema for POST /meal-plans.

    Example request body:
    {
        "date": "2026-03-10",
        "meal_type": "dinner",
        "food_name": "Lasagne",
        "assignee_ids": []
    }
    """
    date: dt.date
    meal_type: MealType
    food_name: str = Field("", max_length=255)
    notes: str = ""
    assignee_ids: List[str] = Field(default_factory=list)


class MealPlanUpdate(BaseModel):
    """Schema for PATCH /meal-plans/{id}. Only provided fields are changed."""
    date: Optional[dt.date] = None
    meal_type: Optional[MealType] = None
    food_name: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    assignee_ids: Optional[List[str]] = None


class MealPlanOut(BaseModel):
    id: str
    date: dt.date
    meal_type: str
    food_name: str
    notes: str
    assignee_ids: List[str]
    created_at: dt.datetime

    class Config:
        from_attributes = True
