"""Schemas for direct messages.

Message payloads never carry either participant's id; ``is_mine`` is computed
against the viewer before serialization and is the only hint of direction.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    recipient_id: int = Field(..., ge=1)
    content: str = Field(..., description="Contenido del mensaje")


class ReplyCreate(BaseModel):
    content: str = Field(..., description="Contenido de la respuesta")


class MessageEditRequest(BaseModel):
    content: str


class ReactionRequest(BaseModel):
    emoji: str = Field(..., description="Emoji de la reacción")


class MessageCreated(BaseModel):
    message_id: int
    thread_id: UUID


class MessageRead(BaseModel):
    id: int
    thread_id: UUID
    content: str
    created_at: datetime | None
    is_read: bool
    read_at: datetime | None = None
    is_mine: bool
    is_edited: bool = False
    edited_at: datetime | None = None
    reactions: dict[str, int] | None = None


class MessageEditRead(BaseModel):
    id: int
    message_id: int
    old_content: str
    edited_at: datetime | None


class ReactionAggregateRead(BaseModel):
    reactions: dict[str, int] = Field(default_factory=dict)


class PinStatusResponse(BaseModel):
    pinned: bool


__all__ = [
    "MessageCreate",
    "MessageCreated",
    "MessageEditRead",
    "MessageEditRequest",
    "MessageRead",
    "PinStatusResponse",
    "ReactionAggregateRead",
    "ReactionRequest",
    "ReplyCreate",
]
