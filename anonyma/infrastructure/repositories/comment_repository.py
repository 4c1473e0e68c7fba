"""Persistence helpers for broadcast comments."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from anonyma.domain.entities import Comment
from anonyma.infrastructure.database import transaction
from anonyma.infrastructure.models import BroadcastCommentModel
from anonyma.utils import ensure_app_timezone, to_storage_datetime


class CommentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, comment: Comment) -> Comment:
        model = BroadcastCommentModel(
            broadcast_id=comment.broadcast_id,
            user_id=comment.user_id,
            content=comment.content,
            parent_comment_id=comment.parent_comment_id,
        )
        with transaction(self.session):
            self.session.add(model)
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, comment_id: int, *, include_deleted: bool = False) -> Comment | None:
        query = self.session.query(BroadcastCommentModel).filter(
            BroadcastCommentModel.id == comment_id
        )
        if not include_deleted:
            query = query.filter(BroadcastCommentModel.deleted_at.is_(None))
        model = query.first()
        return self._to_entity(model) if model else None

    def list_for_broadcast(self, broadcast_id: int) -> Sequence[Comment]:
        query = (
            self.session.query(BroadcastCommentModel)
            .filter(
                BroadcastCommentModel.broadcast_id == broadcast_id,
                BroadcastCommentModel.deleted_at.is_(None),
            )
            .order_by(
                BroadcastCommentModel.created_at.asc(), BroadcastCommentModel.id.asc()
            )
        )
        return [self._to_entity(model) for model in query.all()]

    def soft_delete(self, comment_id: int, *, deleted_at: datetime) -> bool:
        with transaction(self.session):
            updated = (
                self.session.query(BroadcastCommentModel)
                .filter(
                    BroadcastCommentModel.id == comment_id,
                    BroadcastCommentModel.deleted_at.is_(None),
                )
                .update(
                    {BroadcastCommentModel.deleted_at: to_storage_datetime(deleted_at)},
                    synchronize_session=False,
                )
            )
        return updated > 0

    @staticmethod
    def _to_entity(model: BroadcastCommentModel) -> Comment:
        return Comment(
            id=model.id,
            broadcast_id=model.broadcast_id,
            user_id=model.user_id,
            content=model.content,
            parent_comment_id=model.parent_comment_id,
            created_at=ensure_app_timezone(model.created_at),
            deleted_at=ensure_app_timezone(model.deleted_at),
            username=model.user.username if model.user is not None else None,
        )


__all__ = ["CommentRepository"]
