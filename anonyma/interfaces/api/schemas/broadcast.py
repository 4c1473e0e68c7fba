"""Schemas for broadcasts and their comments."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BroadcastCreate(BaseModel):
    content: str
    is_anonymous: bool = False


class BroadcastRead(BaseModel):
    id: int
    content: str
    is_anonymous: bool
    created_at: datetime | None
    sender_username: str | None = None
    view_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class BroadcastViewResponse(BaseModel):
    broadcast_id: int
    first_view: bool


class CommentCreate(BaseModel):
    content: str
    parent_comment_id: int | None = Field(default=None, ge=1)


class CommentRead(BaseModel):
    id: int
    broadcast_id: int
    user_id: int
    username: str | None = None
    content: str
    parent_comment_id: int | None = None
    created_at: datetime | None
    reactions: dict[str, int] | None = None

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "BroadcastCreate",
    "BroadcastRead",
    "BroadcastViewResponse",
    "CommentCreate",
    "CommentRead",
]
