"""Schemas for conversation listings and typing status."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel

from .message import MessageRead


class ConversationRead(BaseModel):
    thread_id: UUID
    latest: MessageRead
    unread_count: int
    counterpart_username: str | None = None
    is_pinned: bool = False


class ThreadDeletedResponse(BaseModel):
    thread_id: UUID
    deleted_messages: int


class TypingStatusRead(BaseModel):
    is_typing: bool


__all__ = ["ConversationRead", "ThreadDeletedResponse", "TypingStatusRead"]
