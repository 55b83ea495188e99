"""
Meal plans router - CRUD for planned meals.

Meals appear on the calendar as read-only pseudo-events at fixed times of
day (see app/services/meal_events.py); they are edited only here.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_current_user
from app.models.meal_plan import MealPlan
from app.models.user import User
from app.schemas.meal_plan import MealPlanCreate, MealPlanOut, MealPlanUpdate


router = APIRouter(prefix="/meal-plans", tags=["meal-plans"])


def get_meal_plan_or_404(db: Session, meal_plan_id: str, family_id: str) -> MealPlan:
    meal_plan = db.query(MealPlan).filter(
        MealPlan.id == meal_plan_id,
        MealPlan.family_id == family_id,
    ).first()

    if not meal_plan:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Meal plan not found",
        )

    return meal_plan


@router.post("", response_model=MealPlanOut, status_code=status.HTTP_201_CREATED)
def create_meal_plan(
    payload: MealPlanCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meal_plan = MealPlan(family_id=current_user.family_id, **payload.model_dump())
    db.add(meal_plan)
    db.commit()
    db.refresh(meal_plan)
    return meal_plan


@router.get("", response_model=list[MealPlanOut])
def list_meal_plans(
    day: Optional[date] = Query(None, alias="date", description="Single day (YYYY-MM-DD)"),
    start: Optional[date] = Query(None, description="First day of range"),
    end: Optional[date] = Query(None, description="Last day of range (inclusive)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List meal plans, optionally for one day or an inclusive day range."""
    query = db.query(MealPlan).filter(MealPlan.family_id == current_user.family_id)

    if day is not None:
        query = query.filter(MealPlan.date == day)
    else:
        if start is not None:
            query = query.filter(MealPlan.date >= start)
        if end is not None:
            query = query.filter(MealPlan.date <= end)

    return query.order_by(MealPlan.date, MealPlan.created_at).all()


@router.get("/{meal_plan_id}", response_model=MealPlanOut)
def get_meal_plan(
    meal_plan_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_meal_plan_or_404(db, meal_plan_id, current_user.family_id)


@router.patch("/{meal_plan_id}", response_model=MealPlanOut)
def update_meal_plan(
    meal_plan_id: str,
    payload: MealPlanUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meal_plan = get_meal_plan_or_404(db, meal_plan_id, current_user.family_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(meal_plan, field, value)

    db.commit()
    db.refresh(meal_plan)
    return meal_plan


@router.delete("/{meal_plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal_plan(
    meal_plan_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    meal_plan = get_meal_plan_or_404(db, meal_plan_id, current_user.family_id)
    db.delete(meal_plan)
    db.commit()
    return None
