"""ORM models used by the application infrastructure."""

from .broadcast import BroadcastCommentModel, BroadcastModel, BroadcastViewModel
from .message import (
    MessageEditModel,
    MessageModel,
    PinnedMessageModel,
    PinnedThreadModel,
)
from .reaction import ReactionModel
from .typing_indicator import TypingIndicatorModel
from .user import UserBlockModel, UserModel, UserPreferenceModel

__all__ = [
    "BroadcastCommentModel",
    "BroadcastModel",
    "BroadcastViewModel",
    "MessageEditModel",
    "MessageModel",
    "PinnedMessageModel",
    "PinnedThreadModel",
    "ReactionModel",
    "TypingIndicatorModel",
    "UserBlockModel",
    "UserModel",
    "UserPreferenceModel",
]
