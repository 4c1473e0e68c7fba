"""Live events pushed to connected clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

EVENT_NEW_MESSAGE = "new_message"
EVENT_NEW_BROADCAST = "new_broadcast"
EVENT_NEW_COMMENT = "new_comment"
EVENT_TYPING = "typing"
EVENT_KEEP_ALIVE = "keep-alive"


@dataclass(frozen=True)
class Event:
    """Refresh hint delivered through the notification hub. Never stored."""

    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)


def new_message_event(message_id: int, thread_id: UUID, content: str) -> Event:
    return Event(
        EVENT_NEW_MESSAGE,
        {"message_id": message_id, "thread_id": thread_id, "content": content},
    )


def new_broadcast_event(broadcast_id: int) -> Event:
    return Event(EVENT_NEW_BROADCAST, {"broadcast_id": broadcast_id})


def new_comment_event(broadcast_id: int, comment_id: int) -> Event:
    return Event(
        EVENT_NEW_COMMENT, {"broadcast_id": broadcast_id, "comment_id": comment_id}
    )


def typing_event(thread_id: UUID, user_id: int | None, username: str | None) -> Event:
    return Event(
        EVENT_TYPING,
        {"thread_id": thread_id, "user_id": user_id, "username": username},
    )


__all__ = [
    "EVENT_NEW_MESSAGE",
    "EVENT_NEW_BROADCAST",
    "EVENT_NEW_COMMENT",
    "EVENT_TYPING",
    "EVENT_KEEP_ALIVE",
    "Event",
    "new_message_event",
    "new_broadcast_event",
    "new_comment_event",
    "typing_event",
]
