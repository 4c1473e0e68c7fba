"""Persistence helpers for typing markers."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from anonyma.domain.entities import TypingMarker
from anonyma.infrastructure.database import transaction
from anonyma.infrastructure.models import TypingIndicatorModel
from anonyma.utils import ensure_app_timezone, to_storage_datetime


class TypingRepository:
    """Keep at most one ``started_at`` per (thread, user)."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, thread_id: UUID, user_id: int, started_at: datetime) -> None:
        try:
            self._upsert(thread_id, user_id, started_at)
        except IntegrityError:
            self._upsert(thread_id, user_id, started_at)

    def list_for_thread(self, thread_id: UUID) -> list[TypingMarker]:
        query = self.session.query(TypingIndicatorModel).filter(
            TypingIndicatorModel.thread_id == thread_id
        )
        return [
            TypingMarker(
                thread_id=model.thread_id,
                user_id=model.user_id,
                started_at=ensure_app_timezone(model.started_at),
            )
            for model in query.all()
        ]

    def delete_older_than(self, cutoff: datetime) -> int:
        """Remove markers that started before the naive storage ``cutoff``."""

        with transaction(self.session):
            deleted = (
                self.session.query(TypingIndicatorModel)
                .filter(TypingIndicatorModel.started_at < cutoff)
                .delete(synchronize_session=False)
            )
        return deleted

    def _upsert(self, thread_id: UUID, user_id: int, started_at: datetime) -> None:
        stamp = to_storage_datetime(started_at)
        with transaction(self.session):
            model = (
                self.session.query(TypingIndicatorModel)
                .filter(
                    TypingIndicatorModel.thread_id == thread_id,
                    TypingIndicatorModel.user_id == user_id,
                )
                .first()
            )
            if model is None:
                self.session.add(
                    TypingIndicatorModel(
                        thread_id=thread_id, user_id=user_id, started_at=stamp
                    )
                )
            else:
                model.started_at = stamp


__all__ = ["TypingRepository"]
