# tests/helpers.py
import asyncio
import copy
from datetime import datetime, timezone
from unittest.mock import MagicMock

from bson import ObjectId

from meal_optimizer.services.week_resolver import WEEKDAY_NAMES
from meal_optimizer.services.weekly_plan_store import WeeklyPlanStore

USER_ID = "64b7f0c2a1b2c3d4e5f60718"
OTHER_USER_ID = "64b7f0c2a1b2c3d4e5f60799"

# Wednesday of the week Mon 2024-03-04 .. Sun 2024-03-10
WEDNESDAY = datetime(2024, 3, 6, 12, 30, tzinfo=timezone.utc)


class InMemoryWeeklyPlanStore(WeeklyPlanStore):
    """Weekly plan store keeping documents in a list.

    Documents are returned by reference, the same way a fresh read would
    reflect the latest write. Completion toggling runs the real store logic.
    """

    def __init__(self):
        super().__init__(MagicMock())
        self.collection.update_one.return_value.matched_count = 1
        self.documents = []

    def _matches(self, doc, user_id, week):
        return str(doc["user_id"]) == str(user_id) and all(doc[k] == v for k, v in week.key().items())

    def find_active(self, user_id, week):
        for doc in self.documents:
            if self._matches(doc, user_id, week) and doc["is_active"]:
                return doc
        return None

    def upsert(self, user_id, week, option_name, days, preferences, now):
        doc = next((d for d in self.documents if self._matches(d, user_id, week)), None)
        if doc is None:
            doc = {"_id": ObjectId(), "user_id": ObjectId(user_id), **week.key(), "created_at": now}
            self.documents.append(doc)
        doc.update({
            "week_number": week.week_number,
            "start_date": week.start_date,
            "end_date": week.end_date,
            "option_name": option_name,
            "days": days,
            "preferences": preferences,
            "is_active": True,
            "last_accessed": now,
            "updated_at": now,
        })
        return doc

    def touch_last_accessed(self, plan, now):
        plan["last_accessed"] = now
        return plan

    def set_active(self, user_id, plan_id, active, now):
        for doc in self.documents:
            if str(doc["_id"]) == str(plan_id) and str(doc["user_id"]) == str(user_id):
                doc["is_active"] = active
                return doc
        return None

    def find_by_id(self, user_id, plan_id):
        for doc in self.documents:
            if str(doc["_id"]) == str(plan_id) and str(doc["user_id"]) == str(user_id) and doc["is_active"]:
                return doc
        return None

    def set_feedback(self, user_id, plan_id, feedback, now):
        doc = self.find_by_id(user_id, plan_id)
        if doc is not None:
            doc["feedback"] = feedback
            doc["updated_at"] = now
        return doc

    def list_for_user(self, user_id, page, limit):
        docs = [d for d in self.documents if str(d["user_id"]) == str(user_id) and d["is_active"]]
        docs.sort(key=lambda d: (d["year"], d["week_number"]), reverse=True)
        return docs[(page - 1) * limit:page * limit], len(docs)

    def find_ending_since(self, user_id, since):
        return [
            d for d in self.documents
            if str(d["user_id"]) == str(user_id) and d["is_active"] and d["end_date"] >= since
        ]


class FakeAIAgentClient:
    """Stands in for the agent service and records every call"""

    def __init__(self, plan_payload=None, insight_response=None, error=None):
        self.plan_payload = plan_payload
        self.insight_response = insight_response or {"success": True, "insight": "You eat well."}
        self.error = error
        self.plan_calls = []
        self.insight_calls = []

    async def generate_weekly_plan(self, name, preferences):
        self.plan_calls.append({"name": name, "preferences": preferences})
        # yield so concurrent callers interleave
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.plan_payload)

    async def generate_insight(self, user_profile, completed_meals):
        self.insight_calls.append({"user_profile": user_profile, "completed_meals": completed_meals})
        return self.insight_response


def make_meal(name, calories=400, protein=20, carbs=50, fat=10, ingredients=None, **extra):
    meal = {
        "name": name,
        "calories": calories,
        "protein": protein,
        "carbs": carbs,
        "fat": fat,
        "ingredients": ingredients if ingredients is not None else ["Tomato", "Onion", "Rice"],
        "youtube_link": "https://youtube.com/watch?v=abc",
        "image_url": "https://img.example.com/meal.jpg",
        "cookTime": "25 mins",
    }
    meal.update(extra)
    return meal


def make_upstream_payload(option_name="Balanced Week"):
    days = []
    for day in WEEKDAY_NAMES:
        days.append({
            "day": day,
            "breakfast": make_meal(f"{day} Oats", calories=300, ingredients=["Rolled oats", "Milk", "Banana"]),
            "lunch": make_meal(f"{day} Paneer Bowl", calories=550, ingredients=["Paneer", "Rice", "tomato"]),
            "dinner": make_meal(f"{day} Dal", calories=450, ingredients=["Lentils", "Tomato", "Turmeric"]),
        })
    return {"success": True, "meal_plans": [{"option_name": option_name, "days": days}]}


