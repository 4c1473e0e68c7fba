"""Domain entities for direct messages and their threads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class MessageState(str, Enum):
    """Lifecycle of a message row."""

    ACTIVE = "active"
    EDITED = "edited"
    DELETED = "deleted"


@dataclass
class Message:
    """A single message inside a two-party thread.

    ``sender_id`` is ``None`` when the sender chose to stay unknown. It must
    never be serialized to a viewer; use :meth:`is_authored_by` instead.
    """

    id: int | None
    thread_id: UUID
    sender_id: int | None
    recipient_id: int
    content: str
    created_at: datetime | None = None
    is_read: bool = False
    read_at: datetime | None = None
    state: MessageState = MessageState.ACTIVE
    edited_at: datetime | None = None
    deleted_at: datetime | None = None
    reactions: dict[str, int] | None = None

    @property
    def is_deleted(self) -> bool:
        return self.state is MessageState.DELETED

    @property
    def is_edited(self) -> bool:
        return self.state is MessageState.EDITED

    def is_authored_by(self, user_id: int | None) -> bool:
        """Return ``True`` when ``user_id`` is the known sender."""

        return user_id is not None and self.sender_id == user_id

    def involves(self, user_id: int) -> bool:
        """Return ``True`` when ``user_id`` is either end of this message."""

        return self.recipient_id == user_id or self.is_authored_by(user_id)


@dataclass
class ThreadSummary:
    """One row of a user's conversation list."""

    thread_id: UUID
    latest: Message
    unread_count: int
    # Only populated when the caller authored ``latest``.
    counterpart_username: str | None
    is_pinned: bool = False


@dataclass
class MessageEdit:
    """Prior content of a message, recorded before an edit overwrote it."""

    id: int | None
    message_id: int
    old_content: str
    edited_by: int
    edited_at: datetime | None


__all__ = ["MessageState", "Message", "ThreadSummary", "MessageEdit"]
