"""
Auth package for JWT authentication
"""

from .jwt_auth import (
    get_current_user,
    get_current_user_id,
    create_access_token,
    token_for_user,
    hash_password,
    verify_password
)

__all__ = [
    "get_current_user",
    "get_current_user_id",
    "create_access_token",
    "token_for_user",
    "hash_password",
    "verify_password"
]
