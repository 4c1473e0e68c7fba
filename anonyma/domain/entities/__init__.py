"""Domain entities exposed by the application."""

from .broadcast import Broadcast, Comment
from .event import (
    EVENT_KEEP_ALIVE,
    EVENT_NEW_BROADCAST,
    EVENT_NEW_COMMENT,
    EVENT_NEW_MESSAGE,
    EVENT_TYPING,
    Event,
    new_broadcast_event,
    new_comment_event,
    new_message_event,
    typing_event,
)
from .message import Message, MessageEdit, MessageState, ThreadSummary
from .reaction import ReactionSubject, ReactionSubjectType
from .typing_marker import TypingMarker
from .user import Identity, User, UserPreferences

__all__ = [
    "Broadcast",
    "Comment",
    "EVENT_KEEP_ALIVE",
    "EVENT_NEW_BROADCAST",
    "EVENT_NEW_COMMENT",
    "EVENT_NEW_MESSAGE",
    "EVENT_TYPING",
    "Event",
    "new_broadcast_event",
    "new_comment_event",
    "new_message_event",
    "typing_event",
    "Message",
    "MessageEdit",
    "MessageState",
    "ThreadSummary",
    "ReactionSubject",
    "ReactionSubjectType",
    "TypingMarker",
    "Identity",
    "User",
    "UserPreferences",
]
