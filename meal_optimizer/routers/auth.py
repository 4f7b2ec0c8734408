from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, status
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from meal_optimizer.auth.jwt_auth import (
    get_current_user,
    hash_password,
    token_for_user,
    verify_password,
)
from meal_optimizer.database.connection import USERS, get_db
from meal_optimizer.errors import Unauthenticated, ValidationError
from meal_optimizer.models.user import (
    DEFAULT_BUDGET,
    Location,
    UserLogin,
    UserPreferences,
    UserRegistration,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(user_data: UserRegistration, db: Database = Depends(get_db)):
    """Register a new user with form data"""
    email = _normalize_email(user_data.email)
    if db[USERS].find_one({"email": email}):
        logger.info(f"Registration rejected, email already registered: {email}")
        raise ValidationError("User already exists with this email")

    now = datetime.now(timezone.utc)
    new_user = {
        "name": user_data.name,
        "email": email,
        "password": hash_password(user_data.password),
        "budget": user_data.budget if user_data.budget is not None else DEFAULT_BUDGET,
        "location": (user_data.location or Location()).model_dump(),
        "preferences": (user_data.preferences or UserPreferences()).model_dump(),
        "is_active": True,
        "total_meal_plans_generated": 0,
        "last_meal_plan_generated": None,
        "last_login": now,
        "created_at": now,
        "updated_at": now,
    }
    try:
        result = db[USERS].insert_one(new_user)
    except DuplicateKeyError:
        raise ValidationError("User already exists with this email")
    new_user["_id"] = result.inserted_id
    logger.info(f"User registered: {result.inserted_id}")

    return {
        "success": True,
        "message": "User registered successfully",
        "token": token_for_user(new_user),
        "user": UserResponse.from_document(new_user).model_dump(mode="json"),
    }


@router.post("/login")
def login_user(credentials: UserLogin, db: Database = Depends(get_db)):
    email = _normalize_email(credentials.email)
    user = db[USERS].find_one({"email": email})
    if not user or not user.get("password") or not verify_password(credentials.password, user["password"]):
        logger.info(f"Failed login for {email}")
        raise Unauthenticated("Invalid email or password")
    if not user.get("is_active", True):
        raise Unauthenticated("Account is deactivated")

    now = datetime.now(timezone.utc)
    db[USERS].update_one({"_id": user["_id"]}, {"$set": {"last_login": now}})
    user["last_login"] = now
    logger.info(f"User logged in: {user['_id']}")

    return {
        "success": True,
        "message": "Login successful",
        "token": token_for_user(user),
        "user": UserResponse.from_document(user).model_dump(mode="json"),
    }


@router.get("/me")
def read_current_user(current_user: dict = Depends(get_current_user)):
    return {"success": True, "user": UserResponse.from_document(current_user).model_dump(mode="json")}


@router.post("/logout")
def logout_user(current_user: dict = Depends(get_current_user)):
    # Tokens are stateless, the client discards its copy
    logger.info(f"User logged out: {current_user['_id']}")
    return {"success": True, "message": "Logged out successfully"}
