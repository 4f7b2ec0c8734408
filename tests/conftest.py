# tests/conftest.py
import pytest
from bson import ObjectId

from meal_optimizer.services.meal_plan_service import MealPlanService

from helpers import USER_ID, FakeAIAgentClient, InMemoryWeeklyPlanStore, make_upstream_payload


@pytest.fixture
def store():
    return InMemoryWeeklyPlanStore()


@pytest.fixture
def ai_client():
    return FakeAIAgentClient(plan_payload=make_upstream_payload())


@pytest.fixture
def service(store, ai_client):
    return MealPlanService(store, ai_client)


@pytest.fixture
def preferences():
    return {"cuisines": ["Indian"], "goals": ["Eat Healthier"], "allergies": [], "dietaryRestrictions": ["vegetarian"]}


@pytest.fixture
def user_doc(preferences):
    return {
        "_id": ObjectId(USER_ID),
        "name": "Asha",
        "email": "asha@example.com",
        "budget": 75,
        "location": {"city": "Pune", "state": "MH", "country": "India"},
        "preferences": preferences,
        "is_active": True,
    }
