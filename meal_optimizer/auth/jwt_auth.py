"""
JWT Authentication Utilities
Centralized authentication functions for all routers
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt as pyjwt
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database

from meal_optimizer import config
from meal_optimizer.database.connection import USERS, get_db
from meal_optimizer.errors import Unauthenticated

logger = logging.getLogger(__name__)

# Missing credentials are reported as Unauthenticated rather than FastAPI's default
security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(data: dict) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(hours=config.JWT_EXPIRATION_TIME_HOURS)
    to_encode.update({"exp": expire})
    return pyjwt.encode(to_encode, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def token_for_user(user: dict) -> str:
    return create_access_token({
        "sub": str(user["_id"]),
        "email": user.get("email"),
        "name": user.get("name"),
    })


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Database = Depends(get_db),
) -> dict:
    """Get current user from JWT token"""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No authentication token provided")

    try:
        payload = pyjwt.decode(credentials.credentials, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except pyjwt.ExpiredSignatureError:
        raise Unauthenticated("Your session has expired. Please log in again.")
    except pyjwt.PyJWTError as e:
        logger.warning(f"Rejected token: {e}")
        raise Unauthenticated("Invalid authentication token. Please log in again.")

    user_id = payload.get("sub")
    try:
        user_object_id = ObjectId(user_id)
    except (InvalidId, TypeError):
        raise Unauthenticated("Invalid authentication credentials")

    user = db[USERS].find_one({"_id": user_object_id}, {"password": 0})
    if user is None:
        raise Unauthenticated("User not found")
    if not user.get("is_active", True):
        raise Unauthenticated("Account is deactivated")
    return user


def get_current_user_id(current_user: dict = Depends(get_current_user)) -> str:
    """Extract user ID from current user object"""
    user_id = current_user.get("_id")
    if not user_id:
        raise Unauthenticated("User ID not found in token")
    return str(user_id)
