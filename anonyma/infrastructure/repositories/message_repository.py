"""Persistence helpers for messages, threads, edit history and pins."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Query, Session

from anonyma.domain.entities import Message, MessageEdit, MessageState
from anonyma.domain.errors import NotFoundError
from anonyma.infrastructure.database import transaction
from anonyma.infrastructure.models import (
    MessageEditModel,
    MessageModel,
    PinnedMessageModel,
    PinnedThreadModel,
)
from anonyma.utils import ensure_app_timezone, to_storage_datetime

_LIKE_ESCAPE = "\\"


class MessageRepository:
    """Durable record of messages grouped into threads.

    Every query that feeds a reader goes through :meth:`_active`, the single
    place where tombstoned rows are excluded.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, message_id: int, *, include_deleted: bool = False) -> Message | None:
        query = self.session.query(MessageModel).filter(MessageModel.id == message_id)
        if not include_deleted:
            query = self._active(query)
        model = query.first()
        return self._to_entity(model) if model else None

    def create(self, message: Message) -> Message:
        model = MessageModel(
            thread_id=message.thread_id,
            sender_id=message.sender_id,
            recipient_id=message.recipient_id,
            content=message.content,
            is_read=False,
            state=MessageState.ACTIVE.value,
        )
        if message.created_at is not None:
            model.created_at = to_storage_datetime(message.created_at)
        with transaction(self.session):
            self.session.add(model)
        self.session.refresh(model)
        return self._to_entity(model)

    def list_thread(self, thread_id: UUID) -> list[Message]:
        """Return the active messages of ``thread_id`` oldest first."""

        query = self._active(
            self.session.query(MessageModel).filter(MessageModel.thread_id == thread_id)
        )
        return [self._to_entity(model) for model in self._chronological(query).all()]

    def latest_in_thread(self, thread_id: UUID) -> Message | None:
        query = self._active(
            self.session.query(MessageModel).filter(MessageModel.thread_id == thread_id)
        )
        model = query.order_by(
            MessageModel.created_at.desc(), MessageModel.id.desc()
        ).first()
        return self._to_entity(model) if model else None

    def opening_message(self, thread_id: UUID) -> Message | None:
        """Return the first message ever written to ``thread_id``.

        Tombstoned rows are included so the participant pair stays stable.
        """

        query = self.session.query(MessageModel).filter(
            MessageModel.thread_id == thread_id
        )
        model = self._chronological(query).first()
        return self._to_entity(model) if model else None

    def is_thread_participant(self, thread_id: UUID, user_id: int) -> bool:
        return (
            self.session.query(MessageModel.id)
            .filter(MessageModel.thread_id == thread_id)
            .filter(self._involves(user_id))
            .first()
            is not None
        )

    def mark_read(
        self, message_ids: Iterable[int], *, recipient_id: int, read_at: datetime
    ) -> int:
        """Flag the given unread messages addressed to ``recipient_id`` as read."""

        ids = [message_id for message_id in message_ids if message_id is not None]
        if not ids:
            return 0
        with transaction(self.session):
            updated = (
                self.session.query(MessageModel)
                .filter(
                    MessageModel.id.in_(ids),
                    MessageModel.recipient_id == recipient_id,
                    MessageModel.is_read.is_(False),
                )
                .update(
                    {
                        MessageModel.is_read: True,
                        MessageModel.read_at: to_storage_datetime(read_at),
                    },
                    synchronize_session=False,
                )
            )
        return updated

    def list_participating(self, user_id: int) -> list[Message]:
        """Return every active message of every thread ``user_id`` takes part in."""

        thread_ids = (
            select(MessageModel.thread_id).where(self._involves(user_id)).distinct()
        )
        query = self._active(
            self.session.query(MessageModel).filter(MessageModel.thread_id.in_(thread_ids))
        )
        return [self._to_entity(model) for model in self._chronological(query).all()]

    def list_inbox(self, recipient_id: int, *, limit: int | None = None) -> list[Message]:
        query = self._active(
            self.session.query(MessageModel).filter(
                MessageModel.recipient_id == recipient_id
            )
        ).order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def search(self, user_id: int, text: str, *, limit: int) -> list[Message]:
        pattern = f"%{_escape_like(text)}%"
        query = (
            self._active(self.session.query(MessageModel))
            .filter(self._involves(user_id))
            .filter(MessageModel.content.ilike(pattern, escape=_LIKE_ESCAPE))
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def update_content(
        self, message_id: int, *, content: str, edited_by: int, edited_at: datetime
    ) -> Message:
        """Overwrite the content, recording the previous one in the same transaction."""

        stamp = to_storage_datetime(edited_at)
        with transaction(self.session):
            model = self._active(
                self.session.query(MessageModel).filter(MessageModel.id == message_id)
            ).with_for_update().first()
            if model is None:
                raise NotFoundError("Mensaje no encontrado")
            self.session.add(
                MessageEditModel(
                    message_id=model.id,
                    old_content=model.content,
                    edited_by=edited_by,
                    edited_at=stamp,
                )
            )
            model.content = content
            model.state = MessageState.EDITED.value
            model.edited_at = stamp
        self.session.refresh(model)
        return self._to_entity(model)

    def list_edits(self, message_id: int) -> list[MessageEdit]:
        query = (
            self.session.query(MessageEditModel)
            .filter(MessageEditModel.message_id == message_id)
            .order_by(MessageEditModel.edited_at.asc(), MessageEditModel.id.asc())
        )
        return [
            MessageEdit(
                id=model.id,
                message_id=model.message_id,
                old_content=model.old_content,
                edited_by=model.edited_by,
                edited_at=ensure_app_timezone(model.edited_at),
            )
            for model in query.all()
        ]

    def tombstone(
        self, message_ids: Sequence[int], *, deleted_by: int, deleted_at: datetime
    ) -> int:
        if not message_ids:
            return 0
        with transaction(self.session):
            updated = (
                self._active(
                    self.session.query(MessageModel).filter(
                        MessageModel.id.in_(list(message_ids))
                    )
                )
                .update(
                    {
                        MessageModel.state: MessageState.DELETED.value,
                        MessageModel.deleted_at: to_storage_datetime(deleted_at),
                        MessageModel.deleted_by: deleted_by,
                    },
                    synchronize_session=False,
                )
            )
        return updated

    def toggle_message_pin(self, message_id: int, user_id: int) -> bool:
        """Pin or unpin ``message_id`` for ``user_id``; return the new state."""

        with transaction(self.session):
            existing = (
                self.session.query(PinnedMessageModel)
                .filter(
                    PinnedMessageModel.message_id == message_id,
                    PinnedMessageModel.user_id == user_id,
                )
                .first()
            )
            if existing is not None:
                self.session.delete(existing)
                pinned = False
            else:
                self.session.add(PinnedMessageModel(message_id=message_id, user_id=user_id))
                pinned = True
        return pinned

    def toggle_thread_pin(self, thread_id: UUID, user_id: int) -> bool:
        with transaction(self.session):
            existing = (
                self.session.query(PinnedThreadModel)
                .filter(
                    PinnedThreadModel.thread_id == thread_id,
                    PinnedThreadModel.user_id == user_id,
                )
                .first()
            )
            if existing is not None:
                self.session.delete(existing)
                pinned = False
            else:
                self.session.add(PinnedThreadModel(thread_id=thread_id, user_id=user_id))
                pinned = True
        return pinned

    def pinned_thread_ids(self, user_id: int) -> set[UUID]:
        query = self.session.query(PinnedThreadModel.thread_id).filter(
            PinnedThreadModel.user_id == user_id
        )
        return {thread_id for (thread_id,) in query.all()}

    def pinned_message_ids(self, user_id: int) -> set[int]:
        query = self.session.query(PinnedMessageModel.message_id).filter(
            PinnedMessageModel.user_id == user_id
        )
        return {message_id for (message_id,) in query.all()}

    @staticmethod
    def _active(query: Query) -> Query:
        return query.filter(MessageModel.state != MessageState.DELETED.value)

    @staticmethod
    def _chronological(query: Query) -> Query:
        return query.order_by(MessageModel.created_at.asc(), MessageModel.id.asc())

    @staticmethod
    def _involves(user_id: int):
        return or_(MessageModel.sender_id == user_id, MessageModel.recipient_id == user_id)

    @staticmethod
    def _to_entity(model: MessageModel) -> Message:
        return Message(
            id=model.id,
            thread_id=model.thread_id,
            sender_id=model.sender_id,
            recipient_id=model.recipient_id,
            content=model.content,
            created_at=ensure_app_timezone(model.created_at),
            is_read=bool(model.is_read),
            read_at=ensure_app_timezone(model.read_at),
            state=MessageState(model.state),
            edited_at=ensure_app_timezone(model.edited_at),
            deleted_at=ensure_app_timezone(model.deleted_at),
        )


def _escape_like(value: str) -> str:
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )


__all__ = ["MessageRepository"]
