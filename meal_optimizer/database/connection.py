import logging
from functools import lru_cache

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from meal_optimizer import config

logger = logging.getLogger(__name__)

USERS = "users"
WEEKLY_MEAL_PLANS = "weekly_meal_plans"


@lru_cache(maxsize=1)
def get_client() -> MongoClient:
    # MongoClient connects lazily, so building it never blocks app import
    client = MongoClient(
        config.MONGODB_URI,
        serverSelectionTimeoutMS=config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        tz_aware=True,
    )
    logger.info(f"MongoDB client created for database: {config.DB_NAME}")
    return client


def get_db() -> Database:
    """FastAPI dependency returning the application database"""
    return get_client()[config.DB_NAME]


def ping(db: Database) -> bool:
    try:
        db.client.admin.command("ping")
        return True
    except Exception as e:
        logger.warning(f"Database ping failed: {e}")
        return False


def ensure_indexes(db: Database):
    # idempotent index creation
    try:
        plans = db[WEEKLY_MEAL_PLANS]
        plans.create_index(
            [("user_id", ASCENDING), ("year", ASCENDING), ("month", ASCENDING), ("week_of_month", ASCENDING)],
            unique=True,
            name="ux_user_week",
        )
        plans.create_index([("user_id", ASCENDING), ("start_date", ASCENDING)], name="idx_user_start")
        plans.create_index(
            [("user_id", ASCENDING), ("is_active", ASCENDING), ("created_at", DESCENDING)],
            name="idx_user_active_created",
        )
        db[USERS].create_index([("email", ASCENDING)], unique=True, name="ux_user_email")
    except Exception as e:
        logger.error(f"Could not ensure indexes: {e}")
