"""Domain entities for public broadcasts and their comments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Broadcast:
    """Public post visible to every user."""

    id: int | None
    sender_id: int | None
    content: str
    is_anonymous: bool
    created_at: datetime | None = None
    sender_username: str | None = None
    view_count: int = 0


@dataclass
class Comment:
    """Comment on a broadcast, optionally replying to another comment."""

    id: int | None
    broadcast_id: int
    user_id: int
    content: str
    parent_comment_id: int | None = None
    created_at: datetime | None = None
    deleted_at: datetime | None = None
    username: str | None = None
    reactions: dict[str, int] | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


__all__ = ["Broadcast", "Comment"]
