# tests/test_recipes_api.py
import pytest
from fastapi.testclient import TestClient

from meal_optimizer.auth.jwt_auth import get_current_user
from meal_optimizer.dependencies import get_ai_agent_client
from meal_optimizer.errors import UpstreamUnavailable
from meal_optimizer.main import app

client = TestClient(app)


class RecordingAgent:
    def __init__(self, error=None):
        self.error = error
        self.searches = []

    async def search_recipes(self, criteria):
        self.searches.append(criteria)
        if self.error is not None:
            raise self.error
        return {"success": True, "recipes": [{"name": "Chana Masala"}]}

    async def get_cuisines(self):
        return {"success": True, "cuisines": ["Indian", "Italian"]}

    async def get_dataset_stats(self):
        return {"success": True, "totalRecipes": 1200, "cuisines": 2}


@pytest.fixture
def agent(user_doc):
    agent = RecordingAgent()
    app.dependency_overrides[get_current_user] = lambda: user_doc
    app.dependency_overrides[get_ai_agent_client] = lambda: agent
    yield agent
    app.dependency_overrides.clear()


def test_search_applies_defaults(agent):
    response = client.post("/api/recipes/search", json={"cuisines": ["Indian"]})

    assert response.status_code == 200
    assert response.json()["recipes"][0]["name"] == "Chana Masala"
    assert agent.searches == [{
        "dietary": ["vegetarian"],
        "cuisines": ["Indian"],
        "allergies": [],
        "maxBudget": 100,
        "limit": 20,
    }]


def test_cuisines_pass_through(agent):
    response = client.get("/api/recipes/cuisines")

    assert response.json()["cuisines"] == ["Indian", "Italian"]


def test_dataset_stats_pass_through(agent):
    response = client.get("/api/recipes/dataset-stats")

    assert response.status_code == 200
    assert response.json() == {"success": True, "totalRecipes": 1200, "cuisines": 2}


def test_agent_down(agent):
    agent.error = UpstreamUnavailable("The meal-plan service is unavailable. Please try again later.")

    response = client.post("/api/recipes/search", json={})

    assert response.status_code == 503
    assert response.json()["error"] == "UpstreamUnavailable"
