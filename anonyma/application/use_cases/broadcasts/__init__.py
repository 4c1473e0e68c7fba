"""Use cases for public broadcasts and their comments."""

from .comments import create_comment, delete_comment, list_comments
from .create_broadcast import create_broadcast
from .list_broadcasts import list_broadcasts, view_broadcast

__all__ = [
    "create_broadcast",
    "create_comment",
    "delete_comment",
    "list_broadcasts",
    "list_comments",
    "view_broadcast",
]
