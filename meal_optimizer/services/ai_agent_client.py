# meal_optimizer/services/ai_agent_client.py
"""
HTTP client for the external AI agent service.

The agent owns recipe selection and nutrition balancing; this client only
moves JSON across the wire and translates transport failures into the
``Upstream*`` error kinds. It never retries: callers decide whether to resubmit.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from meal_optimizer import config
from meal_optimizer.errors import (
    InvalidUpstreamResponse,
    UpstreamError,
    UpstreamTimeout,
    UpstreamUnavailable,
)

logger = logging.getLogger(__name__)


def _upstream_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            if body.get(key):
                return str(body[key])
    return None


class AIAgentClient:
    def __init__(
        self,
        base_url: str = config.AI_AGENT_SERVICE_URL,
        timeout: float = config.AI_AGENT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _send(self, method: str, path: str, payload: Optional[Dict[str, Any]]) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            headers={"Content-Type": "application/json"},
        ) as client:
            response = await client.request(method, path, json=payload)
            response.raise_for_status()
            return response

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        started = time.monotonic()
        try:
            # httpx timeouts apply per phase; this bounds the whole exchange
            response = await asyncio.wait_for(self._send(method, path, payload), self.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.error(f"AI agent timeout on {method} {path} after {self.timeout}s")
            raise UpstreamTimeout("The meal-plan service took too long to respond. Please try again.")
        except httpx.ConnectError as e:
            logger.error(f"AI agent unreachable at {self.base_url}: {e}")
            raise UpstreamUnavailable("The meal-plan service is currently unavailable. Please try again later.")
        except httpx.HTTPStatusError as e:
            message = _upstream_message(e.response) or f"Upstream returned HTTP {e.response.status_code}"
            logger.error(f"AI agent HTTP error on {method} {path}: {e.response.status_code} {message}")
            raise UpstreamError(message)
        except httpx.HTTPError as e:
            logger.error(f"AI agent transport error on {method} {path}: {e}")
            raise UpstreamError(f"Failed to reach the meal-plan service: {e}")

        logger.info(f"AI agent {method} {path} -> {response.status_code} ({time.monotonic() - started:.2f}s)")
        try:
            return response.json()
        except ValueError:
            extra = {"raw_response": response.text} if config.is_development() else None
            raise InvalidUpstreamResponse("The meal-plan service returned a non-JSON response", extra)

    async def generate_weekly_plan(self, name: str, preferences: Dict[str, Any]) -> Any:
        return await self._request("POST", "/api/meal-plan/generate", {"name": name, "preferences": preferences})

    async def generate_insight(self, user_profile: Dict[str, Any], completed_meals: List[Dict[str, Any]]) -> Any:
        return await self._request(
            "POST",
            "/api/insights/generate",
            {"userProfile": user_profile, "completedMeals": completed_meals},
        )

    async def search_recipes(self, criteria: Dict[str, Any]) -> Any:
        return await self._request("POST", "/api/recipes/search", criteria)

    async def get_cuisines(self) -> Any:
        return await self._request("GET", "/api/cuisines")

    async def get_dataset_stats(self) -> Any:
        return await self._request("GET", "/api/dataset/stats")
