# meal_optimizer/services/meal_plan_service.py
"""
Meal Plan Service
Orchestrates weekly plan generation (cache -> agent -> validate -> upsert)
and the per-user operations built on top of the cached plan
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from bson import ObjectId
from pydantic import ValidationError as SchemaValidationError
from pymongo.collection import Collection

from meal_optimizer import config
from meal_optimizer.errors import (
    InsufficientData,
    InvalidUpstreamResponse,
    NeedsGeneration,
    NotFound,
    Unauthenticated,
    UpstreamError,
    ValidationError,
)
from meal_optimizer.models.weekly_meal_plan import MEAL_TYPES, UpstreamPlanOption, UpstreamPlanResponse
from meal_optimizer.services.ai_agent_client import AIAgentClient
from meal_optimizer.services.meal_views import (
    build_grocery_list,
    build_today_meals,
    collect_completed_meals,
)
from meal_optimizer.services.week_resolver import resolve_week, weekday_name
from meal_optimizer.services.weekly_plan_store import WeeklyPlanStore

logger = logging.getLogger(__name__)

MIN_COMPLETED_MEALS_FOR_INSIGHT = 3
INSIGHT_WINDOW = timedelta(days=7)

SOURCE_CACHE = "cache"
SOURCE_GENERATED = "generated"
SOURCE_REGENERATED = "regenerated"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PlanResult(NamedTuple):
    plan: Dict[str, Any]
    source: str

    @property
    def from_cache(self) -> bool:
        return self.source == SOURCE_CACHE


def validate_upstream_plan(payload: Any) -> UpstreamPlanOption:
    """Check the agent's response shape and return the plan option to store"""
    if isinstance(payload, dict) and payload.get("success") is False:
        message = payload.get("error") or payload.get("message") or "The meal-plan service could not generate a meal plan"
        logger.error(f"AI agent reported a failed generation: {message}")
        raise UpstreamError(str(message))

    try:
        parsed = UpstreamPlanResponse.model_validate(payload)
    except SchemaValidationError as e:
        logger.error(f"AI agent returned a malformed meal plan: {e.error_count()} validation errors")
        extra = {"raw_response": payload, "errors": e.errors(include_url=False)} if config.is_development() else None
        raise InvalidUpstreamResponse("The meal-plan service returned an invalid meal plan", extra)

    option = parsed.first_usable_option()
    if option is None:
        extra = {"raw_response": payload} if config.is_development() else None
        raise InvalidUpstreamResponse("The meal-plan service returned a meal plan without any days", extra)
    return option


class MealPlanService:
    def __init__(self, store: WeeklyPlanStore, ai_client: AIAgentClient, users: Optional[Collection] = None):
        self.store = store
        self.ai_client = ai_client
        # generation counters on the user document are skipped when absent
        self.users = users

    async def get_or_generate(
        self,
        user_id: Optional[str],
        name: Optional[str],
        preferences: Optional[Dict[str, Any]],
        force_regenerate: bool = False,
        now: Optional[datetime] = None,
    ) -> PlanResult:
        if not name or preferences is None:
            raise ValidationError("Name and preferences are required to generate a meal plan")
        if not user_id:
            raise Unauthenticated("User not authenticated")

        now = now or _now()
        week = resolve_week(now)

        existing = self.store.find_active(user_id, week)
        if existing is not None and not force_regenerate:
            logger.info(f"Serving cached weekly plan {existing['_id']} for user {user_id}")
            return PlanResult(self.store.touch_last_accessed(existing, now), SOURCE_CACHE)

        logger.info(
            f"{'Regenerating' if force_regenerate else 'Generating'} weekly plan for user {user_id} "
            f"(week starting {week.start_date.date()})"
        )
        payload = await self.ai_client.generate_weekly_plan(name, preferences)
        option = validate_upstream_plan(payload)

        plan = self.store.upsert(
            user_id,
            week,
            option_name=option.option_name,
            days=[day.to_document() for day in option.days],
            preferences=preferences,
            now=now,
        )
        self._record_generation(user_id, now)
        source = SOURCE_REGENERATED if force_regenerate and existing is not None else SOURCE_GENERATED
        return PlanResult(plan, source)

    def _record_generation(self, user_id: str, now: datetime):
        if self.users is None:
            return
        self.users.update_one(
            {"_id": ObjectId(user_id) if ObjectId.is_valid(user_id) else user_id},
            {"$set": {"last_meal_plan_generated": now}, "$inc": {"total_meal_plans_generated": 1}},
        )

    def current_week(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or _now()
        plan = self.store.find_active(user_id, resolve_week(now))
        if plan is None:
            raise NeedsGeneration("No meal plan for this week yet. Generate one first.")
        return self.store.touch_last_accessed(plan, now)

    def list_weeks(self, user_id: str, page: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
        return self.store.list_for_user(user_id, page, limit)

    def set_week_active(self, user_id: str, plan_id: str, active: bool, now: Optional[datetime] = None) -> Dict[str, Any]:
        plan = self.store.set_active(user_id, plan_id, active, now or _now())
        if plan is None:
            raise NotFound("Meal plan not found")
        return plan

    def get_week(self, user_id: str, plan_id: str) -> Dict[str, Any]:
        plan = self.store.find_by_id(user_id, plan_id)
        if plan is None:
            raise NotFound("Meal plan not found")
        return plan

    def set_week_feedback(
        self,
        user_id: str,
        plan_id: str,
        feedback: Dict[str, Any],
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        plan = self.store.set_feedback(user_id, plan_id, feedback, now or _now())
        if plan is None:
            raise NotFound("Meal plan not found")
        logger.info(f"Feedback saved on weekly plan {plan_id} for user {user_id}")
        return plan

    def today_meals(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or _now()
        return build_today_meals(self.current_week(user_id, now), now)

    def today_grocery_list(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or _now()
        return build_grocery_list(self.current_week(user_id, now), now)

    def toggle_meal_completion(
        self,
        user_id: str,
        meal_type: str,
        is_completed: Optional[bool] = None,
        day_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        if meal_type not in MEAL_TYPES:
            raise ValidationError(f"meal_type must be one of: {', '.join(MEAL_TYPES)}")
        now = now or _now()
        day_name = day_name or weekday_name(now)
        meal = self.store.set_meal_completion(user_id, resolve_week(now), day_name, meal_type, is_completed, now)
        logger.info(f"User {user_id} marked {day_name} {meal_type} is_completed={meal['is_completed']}")
        return {"day": day_name, "meal_type": meal_type, "meal": meal}

    async def generate_insight(
        self,
        user_id: str,
        user_profile: Dict[str, Any],
        now: Optional[datetime] = None,
    ) -> Any:
        now = now or _now()
        plans = self.store.find_ending_since(user_id, now - INSIGHT_WINDOW)
        completed = collect_completed_meals(plans)
        if len(completed) < MIN_COMPLETED_MEALS_FOR_INSIGHT:
            raise InsufficientData(
                f"At least {MIN_COMPLETED_MEALS_FOR_INSIGHT} completed meals in the last 7 days are needed "
                f"for insights (found {len(completed)})"
            )
        logger.info(f"Requesting eating-pattern insight for user {user_id} from {len(completed)} meals")
        return await self.ai_client.generate_insight(user_profile, completed)
