"""Repository implementations for infrastructure layer."""

from .broadcast_repository import BroadcastRepository
from .comment_repository import CommentRepository
from .message_repository import MessageRepository
from .reaction_repository import ReactionRepository
from .typing_repository import TypingRepository
from .user_repository import (
    UserBlockRepository,
    UserPreferenceRepository,
    UserRepository,
)

__all__ = [
    "BroadcastRepository",
    "CommentRepository",
    "MessageRepository",
    "ReactionRepository",
    "TypingRepository",
    "UserBlockRepository",
    "UserPreferenceRepository",
    "UserRepository",
]
