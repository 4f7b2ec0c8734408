# tests/test_meal_views.py
from datetime import datetime, timezone

import pytest
from bson import ObjectId

from meal_optimizer.errors import NotFound
from meal_optimizer.services.meal_views import (
    DEFAULT_COOK_TIME,
    FALLBACK_IMAGE_URL,
    build_grocery_list,
    build_today_meals,
    collect_completed_meals,
    group_ingredients,
)

MONDAY = datetime(2024, 3, 4, 8, 0, tzinfo=timezone.utc)


def _stored_meal(name, calories, ingredients, **extra):
    meal = {
        "name": name,
        "calories": calories,
        "protein": 10,
        "carbs": 30,
        "fat": 5,
        "ingredients": ingredients,
        "youtube_link": None,
        "image_url": None,
        "cook_time": "15 mins",
        "is_completed": False,
    }
    meal.update(extra)
    return meal


def _plan(*days):
    return {
        "_id": ObjectId(),
        "option_name": "Test Week",
        "start_date": datetime(2024, 3, 4, tzinfo=timezone.utc),
        "days": list(days),
    }


class TestTodayMeals:

    def test_missing_slots_get_placeholders(self):
        plan = _plan({"day": "Monday", "breakfast": _stored_meal("Poha", 320, ["Poha", "Onion"])})

        view = build_today_meals(plan, MONDAY)

        assert view["day"] == "Monday"
        assert [m["meal_type"] for m in view["meals"]] == ["breakfast", "lunch", "dinner"]
        lunch, dinner = view["meals"][1], view["meals"][2]
        for placeholder in (lunch, dinner):
            assert placeholder["is_placeholder"] is True
            assert placeholder["calories"] == 0
            assert placeholder["ingredients"] == []
            assert placeholder["image"] == FALLBACK_IMAGE_URL
            assert placeholder["cook_time"] == DEFAULT_COOK_TIME
            assert placeholder["is_completed"] is False
        assert view["nutrition_stats"]["calories"] == 320
        assert view["nutrition_stats"]["protein"] == 10

    def test_nutrition_is_summed_across_slots(self):
        plan = _plan({
            "day": "Monday",
            "breakfast": _stored_meal("Oats", 300, []),
            "lunch": _stored_meal("Rice Bowl", 550, []),
            "dinner": _stored_meal("Dal", 450, [], is_completed=True),
        })

        view = build_today_meals(plan, MONDAY)

        assert view["nutrition_stats"] == {"calories": 1300, "protein": 30, "carbs": 90, "fat": 15}
        assert view["completed_count"] == 1

    def test_alternate_image_field_is_folded_into_image(self):
        plan = _plan({"day": "Monday", "lunch": _stored_meal("Wrap", 400, [], image="https://img/wrap.jpg")})

        lunch = build_today_meals(plan, MONDAY)["meals"][1]

        assert lunch["image"] == "https://img/wrap.jpg"
        assert "image_url" not in lunch

    def test_day_missing_from_existing_week(self):
        plan = _plan({"day": "Tuesday", "breakfast": _stored_meal("Idli", 250, [])})

        with pytest.raises(NotFound):
            build_today_meals(plan, MONDAY)


class TestGroceryList:

    def test_case_insensitive_dedup_then_sorted(self):
        grouped = group_ingredients(["Tomato", "tomato", "Onion"])

        assert grouped["Fruits & Vegetables"] == ["Onion", "Tomato"]

    def test_falsy_and_non_text_entries_are_dropped(self):
        grouped = group_ingredients([None, "", "   ", 42, {"name": "rice"}, "Rice"])

        assert grouped == {"Grains": ["Rice"]}

    def test_builds_categories_from_present_slots(self):
        plan = _plan({
            "day": "Monday",
            "breakfast": _stored_meal("Oats", 300, ["Rolled oats", "Milk", "Honey"]),
            "dinner": _stored_meal("Paneer Curry", 500, ["Paneer", "tomato", "Tomato", "Olive oil", "Salt"]),
        })

        grocery = build_grocery_list(plan, MONDAY)

        assert grocery["meals"] == {"breakfast": "Oats", "lunch": None, "dinner": "Paneer Curry"}
        assert grocery["categories"] == {
            "Protein": ["Paneer"],
            "Grains": ["Rolled oats"],
            "Fruits & Vegetables": ["tomato"],
            "Dairy": ["Milk"],
            "Oils": ["Olive oil"],
            "Spices": ["Salt"],
            "Sweeteners": ["Honey"],
        }
        assert grocery["total_items"] == 7

    def test_categories_follow_fixed_order(self):
        grouped = group_ingredients(["water", "almonds", "chicken"])

        assert list(grouped) == ["Protein", "Nuts & Seeds", "Others"]


def test_collect_completed_meals():
    plan = _plan(
        {"day": "Monday", "breakfast": _stored_meal("Oats", 300, ["Oats"], is_completed=True),
         "lunch": _stored_meal("Rice", 500, [])},
        {"day": "Tuesday", "dinner": _stored_meal("Dal", 450, [], is_completed=True)},
    )

    completed = collect_completed_meals([plan])

    assert [(m["day"], m["meal_type"], m["name"]) for m in completed] == [
        ("Monday", "breakfast", "Oats"),
        ("Tuesday", "dinner", "Dal"),
    ]
    assert completed[0]["week_start"] == "2024-03-04T00:00:00+00:00"
