import json
import logging
import traceback
from datetime import datetime, timezone

from bson import ObjectId
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database

from meal_optimizer import config
from meal_optimizer.database.connection import ensure_indexes, get_db, ping
from meal_optimizer.errors import MealPlanError
from meal_optimizer.routers import auth, recipes, users, weekly_meal_plans

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


# Custom JSON encoder for MongoDB ObjectId and datetime
class MongoJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class MongoJSONResponse(JSONResponse):
    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
            cls=MongoJSONEncoder
        ).encode("utf-8")


app = FastAPI(title="Meal Optimizer API", version="1.0.0", default_response_class=MongoJSONResponse)

# Add GZip compression middleware for larger weekly plans
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(weekly_meal_plans.router)
app.include_router(recipes.router)


@app.exception_handler(MealPlanError)
async def meal_plan_error_handler(request: Request, exc: MealPlanError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
    return MongoJSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", [])), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return MongoJSONResponse(
        status_code=400,
        content={"success": False, "error": "ValidationError", "message": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    body = {"success": False, "error": "ServerError", "message": "Internal Server Error"}
    if config.is_development():
        body["message"] = str(exc)
        body["stack"] = traceback.format_exc()
    return MongoJSONResponse(status_code=500, content=body)


@app.on_event("startup")
def _app_startup():
    # Ensure weekly plan and user indexes exist (idempotent)
    ensure_indexes(get_db())


@app.get("/")
def home():
    return {
        "message": "Welcome to Meal Optimizer API",
        "version": app.version,
        "endpoints": {
            "health": "GET /api/health",
            "auth": ["POST /api/auth/register", "POST /api/auth/login", "GET /api/auth/me", "POST /api/auth/logout"],
            "users": [
                "GET /api/users/profile", "PUT /api/users/profile",
                "GET /api/users/preferences", "PUT /api/users/preferences",
                "GET /api/users/stats", "PUT /api/users/budget", "DELETE /api/users/account",
            ],
            "weekly_meal_plans": [
                "POST /api/weekly-meal-plans/generate", "GET /api/weekly-meal-plans/current",
                "GET /api/weekly-meal-plans/", "GET /api/weekly-meal-plans/{plan_id}",
                "PUT /api/weekly-meal-plans/{plan_id}/feedback", "DELETE /api/weekly-meal-plans/{plan_id}",
                "POST /api/weekly-meal-plans/{plan_id}/restore", "GET /api/weekly-meal-plans/today",
                "GET /api/weekly-meal-plans/today/grocery-list", "PATCH /api/weekly-meal-plans/meals/completion",
                "POST /api/weekly-meal-plans/insights",
            ],
            "recipes": ["POST /api/recipes/search", "GET /api/recipes/cuisines", "GET /api/recipes/dataset-stats"],
        },
    }


@app.get("/api/health")
def health_check(db: Database = Depends(get_db)):
    return {
        "status": "OK",
        "message": "Meal Optimizer Backend is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config.ENVIRONMENT,
        "database": "Connected" if ping(db) else "Disconnected",
    }
