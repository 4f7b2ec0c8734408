# meal_optimizer/routers/weekly_meal_plans.py
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query

from meal_optimizer.auth.jwt_auth import get_current_user
from meal_optimizer.database.documents import convert_objectids_to_strings, plan_to_response
from meal_optimizer.dependencies import get_meal_plan_service
from meal_optimizer.models.user import UserPreferences
from meal_optimizer.models.weekly_meal_plan import (
    GenerateWeeklyPlanRequest,
    MealCompletionRequest,
    MealPreferences,
    PlanFeedback,
)
from meal_optimizer.services.meal_plan_service import (
    SOURCE_CACHE,
    SOURCE_REGENERATED,
    MealPlanService,
)

router = APIRouter(prefix="/api/weekly-meal-plans", tags=["Weekly Meal Plans"])

_SOURCE_MESSAGES = {
    SOURCE_CACHE: "Meal plan retrieved from cache",
    SOURCE_REGENERATED: "Meal plan regenerated successfully",
}


def _merged_preferences(current_user: dict, overrides: Optional[MealPreferences]) -> dict:
    """Saved user preferences overlaid with per-request overrides"""
    saved = UserPreferences(**(current_user.get("preferences") or {})).model_dump()
    if overrides is None:
        return saved
    return {**saved, **overrides.model_dump(exclude_unset=True)}


@router.post("/generate")
async def generate_weekly_plan(
    payload: Optional[GenerateWeeklyPlanRequest] = None,
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    payload = payload or GenerateWeeklyPlanRequest()
    result = await service.get_or_generate(
        str(current_user["_id"]),
        payload.name or current_user.get("name"),
        _merged_preferences(current_user, payload.preferences),
        force_regenerate=payload.force_regenerate,
    )
    return {
        "success": True,
        "source": result.source,
        "from_cache": result.from_cache,
        "message": _SOURCE_MESSAGES.get(result.source, "Meal plan generated successfully"),
        "data": plan_to_response(result.plan),
    }


@router.get("/current")
def get_current_week(
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    plan = service.current_week(str(current_user["_id"]))
    return {"success": True, "data": plan_to_response(plan)}


@router.get("/today")
def get_today_meals(
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    return {"success": True, "data": service.today_meals(str(current_user["_id"]))}


@router.get("/today/grocery-list")
def get_today_grocery_list(
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    return {"success": True, "data": service.today_grocery_list(str(current_user["_id"]))}


@router.patch("/meals/completion")
def update_meal_completion(
    payload: MealCompletionRequest,
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    result = service.toggle_meal_completion(
        str(current_user["_id"]),
        payload.meal_type,
        is_completed=payload.is_completed,
        day_name=payload.day,
    )
    return {"success": True, "message": "Meal completion updated", "data": result}


@router.post("/insights")
async def generate_eating_insight(
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    profile = convert_objectids_to_strings({
        "id": current_user["_id"],
        "name": current_user.get("name"),
        "budget": current_user.get("budget"),
        "location": current_user.get("location"),
        "preferences": current_user.get("preferences"),
    })
    return await service.generate_insight(str(current_user["_id"]), profile)


@router.get("/")
def list_weekly_plans(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    plans, total = service.list_weeks(str(current_user["_id"]), page, limit)
    total_pages = math.ceil(total / limit) if total else 0
    return {
        "success": True,
        "data": {
            "plans": [plan_to_response(p) for p in plans],
            "pagination": {
                "current_page": page,
                "total_pages": total_pages,
                "total_count": total,
                "has_next": page < total_pages,
                "has_prev": page > 1,
            },
        },
    }


@router.delete("/{plan_id}")
def delete_weekly_plan(
    plan_id: str,
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    service.set_week_active(str(current_user["_id"]), plan_id, False)
    return {"success": True, "message": "Meal plan deleted successfully"}


@router.post("/{plan_id}/restore")
def restore_weekly_plan(
    plan_id: str,
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    plan = service.set_week_active(str(current_user["_id"]), plan_id, True)
    return {"success": True, "message": "Meal plan restored", "data": plan_to_response(plan)}


@router.get("/{plan_id}")
def get_weekly_plan(
    plan_id: str,
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    plan = service.get_week(str(current_user["_id"]), plan_id)
    return {"success": True, "data": plan_to_response(plan)}


@router.put("/{plan_id}/feedback")
def update_weekly_plan_feedback(
    plan_id: str,
    payload: PlanFeedback,
    current_user: dict = Depends(get_current_user),
    service: MealPlanService = Depends(get_meal_plan_service),
):
    plan = service.set_week_feedback(str(current_user["_id"]), plan_id, payload.model_dump())
    return {"success": True, "message": "Feedback updated successfully", "data": plan_to_response(plan)}
