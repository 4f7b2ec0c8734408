"""
FastAPI dependency providers for services.

Routers never build collaborators themselves; tests swap any of these through
``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends
from pymongo.database import Database

from meal_optimizer import config
from meal_optimizer.database.connection import USERS, WEEKLY_MEAL_PLANS, get_db
from meal_optimizer.services.ai_agent_client import AIAgentClient
from meal_optimizer.services.meal_plan_service import MealPlanService
from meal_optimizer.services.weekly_plan_store import WeeklyPlanStore


@lru_cache(maxsize=1)
def get_ai_agent_client() -> AIAgentClient:
    return AIAgentClient(base_url=config.AI_AGENT_SERVICE_URL, timeout=config.AI_AGENT_TIMEOUT_SECONDS)


def get_weekly_plan_store(db: Database = Depends(get_db)) -> WeeklyPlanStore:
    return WeeklyPlanStore(db[WEEKLY_MEAL_PLANS])


def get_meal_plan_service(
    store: WeeklyPlanStore = Depends(get_weekly_plan_store),
    ai_client: AIAgentClient = Depends(get_ai_agent_client),
    db: Database = Depends(get_db),
) -> MealPlanService:
    return MealPlanService(store, ai_client, db[USERS])
