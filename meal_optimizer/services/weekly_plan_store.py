# meal_optimizer/services/weekly_plan_store.py
"""
Weekly Meal Plan Store
Persistence for one canonical weekly plan per user and week bucket
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from meal_optimizer.errors import NotFound
from meal_optimizer.services.week_resolver import WeekInfo

logger = logging.getLogger(__name__)


def _oid(val) -> Optional[ObjectId]:
    if isinstance(val, ObjectId):
        return val
    try:
        return ObjectId(val)
    except (InvalidId, TypeError):
        return None


class WeeklyPlanStore:
    """Repository over the ``weekly_meal_plans`` collection.

    Every query filters on ``user_id`` so one user can never read or mutate
    another user's plans. Reads only ever see ``is_active`` records.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def _key_filter(self, user_id: str, week: WeekInfo) -> Dict[str, Any]:
        return {"user_id": _oid(user_id) or user_id, **week.key()}

    def find_active(self, user_id: str, week: WeekInfo) -> Optional[Dict[str, Any]]:
        query = self._key_filter(user_id, week)
        query["is_active"] = True
        return self.collection.find_one(query)

    def upsert(
        self,
        user_id: str,
        week: WeekInfo,
        option_name: str,
        days: List[Dict[str, Any]],
        preferences: Dict[str, Any],
        now: datetime,
    ) -> Dict[str, Any]:
        """Create the week's plan or overwrite its mutable fields in one atomic call.

        The unique ``(user_id, year, month, week_of_month)`` index together with
        ``upsert=True`` means two concurrent generations for the same week end
        up on the same document.
        """
        doc = self.collection.find_one_and_update(
            self._key_filter(user_id, week),
            {
                "$set": {
                    "week_number": week.week_number,
                    "start_date": week.start_date,
                    "end_date": week.end_date,
                    "option_name": option_name,
                    "days": days,
                    "preferences": preferences,
                    "is_active": True,
                    "last_accessed": now,
                    "updated_at": now,
                },
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        logger.info(
            f"Upserted weekly plan {doc.get('_id')} for user {user_id} "
            f"({week.year}-{week.month:02d} week {week.week_of_month})"
        )
        return doc

    def touch_last_accessed(self, plan: Dict[str, Any], now: datetime) -> Dict[str, Any]:
        self.collection.update_one({"_id": plan["_id"]}, {"$set": {"last_accessed": now}})
        plan["last_accessed"] = now
        return plan

    def set_active(self, user_id: str, plan_id: str, active: bool, now: datetime) -> Optional[Dict[str, Any]]:
        plan_oid = _oid(plan_id)
        if plan_oid is None:
            return None
        # Ownership is part of the match, so another user's id simply matches nothing
        doc = self.collection.find_one_and_update(
            {"_id": plan_oid, "user_id": _oid(user_id) or user_id},
            {"$set": {"is_active": active, "updated_at": now}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is not None:
            logger.info(f"Weekly plan {plan_id} for user {user_id} set is_active={active}")
        return doc

    def find_by_id(self, user_id: str, plan_id: str) -> Optional[Dict[str, Any]]:
        plan_oid = _oid(plan_id)
        if plan_oid is None:
            return None
        return self.collection.find_one({"_id": plan_oid, "user_id": _oid(user_id) or user_id, "is_active": True})

    def set_feedback(self, user_id: str, plan_id: str, feedback: Dict[str, Any], now: datetime) -> Optional[Dict[str, Any]]:
        """Replace the plan's feedback block; soft-deleted plans are not rateable"""
        plan_oid = _oid(plan_id)
        if plan_oid is None:
            return None
        return self.collection.find_one_and_update(
            {"_id": plan_oid, "user_id": _oid(user_id) or user_id, "is_active": True},
            {"$set": {"feedback": feedback, "updated_at": now}},
            return_document=ReturnDocument.AFTER,
        )

    def set_meal_completion(
        self,
        user_id: str,
        week: WeekInfo,
        day_name: str,
        meal_type: str,
        is_completed: Optional[bool],
        now: datetime,
    ) -> Dict[str, Any]:
        """Set (or flip, when ``is_completed`` is None) one meal slot's completion flag"""
        plan = self.find_active(user_id, week)
        if plan is None:
            raise NotFound("No meal plan found for this week")

        days = plan.get("days") or []
        index = next((i for i, d in enumerate(days) if d.get("day") == day_name), None)
        if index is None:
            raise NotFound(f"No meals planned for {day_name}")

        meal = days[index].get(meal_type)
        if not meal:
            raise NotFound(f"No {meal_type} planned for {day_name}")

        if is_completed is None:
            is_completed = not meal.get("is_completed", False)

        # Only the nested flag is written, sibling slots are left untouched
        result = self.collection.update_one(
            {"_id": plan["_id"], f"days.{index}.day": day_name},
            {"$set": {f"days.{index}.{meal_type}.is_completed": is_completed, "updated_at": now}},
        )
        # days were replaced by a regeneration between the read and the write
        if result.matched_count == 0:
            raise NotFound(f"No meals planned for {day_name}")
        meal["is_completed"] = is_completed
        return meal

    def list_for_user(self, user_id: str, page: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
        query = {"user_id": _oid(user_id) or user_id, "is_active": True}
        cursor = (
            self.collection.find(query)
            .sort([("year", DESCENDING), ("week_number", DESCENDING)])
            .skip((page - 1) * limit)
            .limit(limit)
        )
        plans = list(cursor)
        total = self.collection.count_documents(query)
        return plans, total

    def find_ending_since(self, user_id: str, since: datetime) -> List[Dict[str, Any]]:
        """Active plans whose week ends on or after ``since``"""
        query = {"user_id": _oid(user_id) or user_id, "is_active": True, "end_date": {"$gte": since}}
        return list(self.collection.find(query).sort("start_date", DESCENDING))
