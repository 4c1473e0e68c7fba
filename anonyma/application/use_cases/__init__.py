"""Aggregate application use cases."""

from .messages import create_message, create_reply, get_thread_messages, list_conversations
from .reactions import get_aggregate, set_reaction
from .typing_indicators import list_typing_users, mark_typing, sweep_stale_markers
from .users import authenticate_user, register_user

__all__ = [
    "authenticate_user",
    "create_message",
    "create_reply",
    "get_aggregate",
    "get_thread_messages",
    "list_conversations",
    "list_typing_users",
    "mark_typing",
    "register_user",
    "set_reaction",
    "sweep_stale_markers",
]
