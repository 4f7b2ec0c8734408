# meal_optimizer/services/meal_views.py
"""
Derived views over a cached weekly plan: today's meals, today's grocery list
and the completed-meal history fed to the insight generator.

Everything here is pure; the reference instant is always passed in.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from meal_optimizer.errors import NotFound
from meal_optimizer.models.weekly_meal_plan import MEAL_TYPES
from meal_optimizer.services.ingredient_categorizer import CATEGORIES, categorize
from meal_optimizer.services.week_resolver import weekday_name

FALLBACK_IMAGE_URL = "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?w=400"
DEFAULT_COOK_TIME = "30 mins"
NUTRIENTS = ("calories", "protein", "carbs", "fat")


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def find_day(plan: Dict[str, Any], day_name: str) -> Dict[str, Any]:
    for day in plan.get("days") or []:
        if day.get("day") == day_name:
            return day
    raise NotFound(f"No meals planned for {day_name}")


def placeholder_meal(meal_type: str) -> Dict[str, Any]:
    return {
        "meal_type": meal_type,
        "name": f"No {meal_type} planned",
        "calories": 0,
        "protein": 0,
        "carbs": 0,
        "fat": 0,
        "ingredients": [],
        "image": FALLBACK_IMAGE_URL,
        "youtube_link": None,
        "cook_time": DEFAULT_COOK_TIME,
        "is_completed": False,
        "is_placeholder": True,
    }


def meal_view(meal_type: str, meal: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not meal:
        return placeholder_meal(meal_type)
    return {
        "meal_type": meal_type,
        "name": meal.get("name"),
        "calories": meal.get("calories", 0),
        "protein": meal.get("protein", 0),
        "carbs": meal.get("carbs", 0),
        "fat": meal.get("fat", 0),
        "ingredients": list(meal.get("ingredients") or []),
        "image": meal.get("image_url") or meal.get("image") or FALLBACK_IMAGE_URL,
        "youtube_link": meal.get("youtube_link"),
        "cook_time": meal.get("cook_time") or DEFAULT_COOK_TIME,
        "is_completed": bool(meal.get("is_completed", False)),
        "is_placeholder": False,
    }


def build_today_meals(plan: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Three normalised meal entries for today plus their nutrition totals"""
    today = weekday_name(now)
    day = find_day(plan, today)

    meals = [meal_view(meal_type, day.get(meal_type)) for meal_type in MEAL_TYPES]
    stats = {nutrient: sum(m[nutrient] or 0 for m in meals) for nutrient in NUTRIENTS}

    return {
        "day": today,
        "date": now.date().isoformat(),
        "plan_id": str(plan.get("_id")),
        "option_name": plan.get("option_name"),
        "meals": meals,
        "nutrition_stats": stats,
        "completed_count": sum(1 for m in meals if m["is_completed"]),
    }


def group_ingredients(ingredients: List[Any]) -> Dict[str, List[str]]:
    """Categorise, de-duplicate case-insensitively (first spelling wins) and sort"""
    grouped: Dict[str, Dict[str, str]] = {}
    for item in ingredients:
        if not item or not isinstance(item, str):
            continue
        text = item.strip()
        if not text:
            continue
        bucket = grouped.setdefault(categorize(text), {})
        bucket.setdefault(text.lower(), text)

    return {
        category: sorted(grouped[category].values())
        for category in CATEGORIES
        if category in grouped
    }


def build_grocery_list(plan: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    today = weekday_name(now)
    day = find_day(plan, today)

    ingredients: List[Any] = []
    meal_names: Dict[str, Optional[str]] = {}
    for meal_type in MEAL_TYPES:
        meal = day.get(meal_type)
        meal_names[meal_type] = meal.get("name") if meal else None
        if meal:
            ingredients.extend(meal.get("ingredients") or [])

    categories = group_ingredients(ingredients)
    return {
        "day": today,
        "date": now.date().isoformat(),
        "meals": meal_names,
        "total_items": sum(len(items) for items in categories.values()),
        "categories": categories,
    }


def collect_completed_meals(plans: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    completed = []
    for plan in plans:
        for day in plan.get("days") or []:
            for meal_type in MEAL_TYPES:
                meal = day.get(meal_type)
                if meal and meal.get("is_completed"):
                    completed.append({
                        "day": day.get("day"),
                        "meal_type": meal_type,
                        "week_start": _isoformat(plan.get("start_date")),
                        "name": meal.get("name"),
                        "calories": meal.get("calories"),
                        "protein": meal.get("protein"),
                        "carbs": meal.get("carbs"),
                        "fat": meal.get("fat"),
                        "ingredients": list(meal.get("ingredients") or []),
                    })
    return completed
