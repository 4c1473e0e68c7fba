"""Use cases for direct messages and their threads."""

from .create_message import create_message
from .create_reply import create_reply, reply_to_message, resolve_reply_recipient
from .delete_message import delete_message, delete_thread
from .edit_message import edit_message, list_edit_history
from .get_thread_messages import get_thread_messages
from .list_conversations import list_conversations
from .list_inbox import list_inbox
from .pins import toggle_pin_message, toggle_pin_thread
from .search_messages import search_messages

__all__ = [
    "create_message",
    "create_reply",
    "delete_message",
    "delete_thread",
    "edit_message",
    "get_thread_messages",
    "list_conversations",
    "list_edit_history",
    "list_inbox",
    "reply_to_message",
    "resolve_reply_recipient",
    "search_messages",
    "toggle_pin_message",
    "toggle_pin_thread",
]
