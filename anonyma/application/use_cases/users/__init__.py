"""Use cases for managing users."""

from .authenticate_user import AuthenticationStatus, authenticate_user
from .blocks import block_user, list_blocked_users, unblock_user
from .delete_account import delete_account
from .get_user import get_user
from .list_users import list_users
from .preferences import get_preferences, update_preferences
from .register_user import register_user
from .update_profile import update_profile

__all__ = [
    "AuthenticationStatus",
    "authenticate_user",
    "block_user",
    "delete_account",
    "get_preferences",
    "get_user",
    "list_blocked_users",
    "list_users",
    "register_user",
    "unblock_user",
    "update_preferences",
    "update_profile",
]
