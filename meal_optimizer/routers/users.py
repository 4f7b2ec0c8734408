from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends
from pymongo import ReturnDocument
from pymongo.database import Database

from meal_optimizer.auth.jwt_auth import get_current_user
from meal_optimizer.database.connection import USERS, WEEKLY_MEAL_PLANS, get_db
from meal_optimizer.errors import NotFound, ValidationError
from meal_optimizer.models.user import (
    MAX_BUDGET,
    BudgetUpdate,
    PreferencesUpdate,
    ProfileUpdate,
    UserPreferences,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


def _update_user(db: Database, user_id, fields: dict) -> dict:
    fields["updated_at"] = datetime.now(timezone.utc)
    updated = db[USERS].find_one_and_update(
        {"_id": user_id},
        {"$set": fields},
        projection={"password": 0},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise NotFound("User not found")
    return updated


@router.get("/profile")
def get_profile(current_user: dict = Depends(get_current_user)):
    return {"success": True, "user": UserResponse.from_document(current_user).model_dump(mode="json")}


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    fields = {}
    if payload.name and payload.name.strip():
        fields["name"] = payload.name.strip()
    # negative budgets are ignored rather than rejected
    if payload.budget is not None and 0 <= payload.budget <= MAX_BUDGET:
        fields["budget"] = payload.budget
    if payload.location is not None:
        location = dict(current_user.get("location") or {})
        location.update(payload.location.model_dump(exclude_none=True))
        fields["location"] = location

    updated = _update_user(db, current_user["_id"], fields)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": UserResponse.from_document(updated).model_dump(mode="json"),
    }


@router.get("/preferences")
def get_preferences(current_user: dict = Depends(get_current_user)):
    preferences = UserPreferences(**(current_user.get("preferences") or {}))
    return {"success": True, "preferences": preferences.model_dump()}


@router.put("/preferences")
def update_preferences(
    payload: PreferencesUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    merged = dict(current_user.get("preferences") or {})
    merged.update(payload.model_dump(exclude_none=True))
    preferences = UserPreferences(**merged)

    _update_user(db, current_user["_id"], {"preferences": preferences.model_dump()})
    logger.info(f"Preferences updated for user {current_user['_id']}")
    return {"success": True, "message": "Preferences updated successfully", "preferences": preferences.model_dump()}


@router.get("/stats")
def get_stats(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    active_plans = db[WEEKLY_MEAL_PLANS].count_documents({"user_id": current_user["_id"], "is_active": True})
    return {
        "success": True,
        "stats": {
            "total_meal_plans_generated": current_user.get("total_meal_plans_generated", 0),
            "last_meal_plan_generated": current_user.get("last_meal_plan_generated"),
            "active_weekly_plans": active_plans,
            "member_since": current_user.get("created_at"),
            "last_login": current_user.get("last_login"),
        },
    }


@router.put("/budget")
def update_budget(
    payload: BudgetUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    if payload.budget < 0 or payload.budget > MAX_BUDGET:
        raise ValidationError(f"Valid budget is required (between 0 and {MAX_BUDGET})")
    updated = _update_user(db, current_user["_id"], {"budget": payload.budget})
    return {"success": True, "message": "Budget updated successfully", "budget": updated.get("budget")}


@router.delete("/account")
def deactivate_account(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    # soft delete keeps the user's plans and history intact
    _update_user(db, current_user["_id"], {"is_active": False})
    logger.info(f"Account deactivated: {current_user['_id']}")
    return {"success": True, "message": "Account deactivated successfully"}
