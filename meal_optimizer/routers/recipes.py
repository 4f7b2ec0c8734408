from typing import Optional

from fastapi import APIRouter, Depends

from meal_optimizer.auth.jwt_auth import get_current_user_id
from meal_optimizer.dependencies import get_ai_agent_client
from meal_optimizer.models.weekly_meal_plan import RecipeSearchRequest
from meal_optimizer.services.ai_agent_client import AIAgentClient

router = APIRouter(prefix="/api/recipes", tags=["Recipes"])


@router.post("/search")
async def search_recipes(
    payload: Optional[RecipeSearchRequest] = None,
    user_id: str = Depends(get_current_user_id),
    ai_client: AIAgentClient = Depends(get_ai_agent_client),
):
    """Relay a recipe search to the AI agent service"""
    payload = payload or RecipeSearchRequest()
    criteria = {
        "dietary": payload.dietary or ["vegetarian"],
        "cuisines": payload.cuisines or [],
        "allergies": payload.allergies or [],
        "maxBudget": payload.max_budget if payload.max_budget is not None else 100,
        "limit": payload.limit or 20,
    }
    return await ai_client.search_recipes(criteria)


@router.get("/cuisines")
async def list_cuisines(
    user_id: str = Depends(get_current_user_id),
    ai_client: AIAgentClient = Depends(get_ai_agent_client),
):
    return await ai_client.get_cuisines()


@router.get("/dataset-stats")
async def get_dataset_stats(
    user_id: str = Depends(get_current_user_id),
    ai_client: AIAgentClient = Depends(get_ai_agent_client),
):
    return await ai_client.get_dataset_stats()
