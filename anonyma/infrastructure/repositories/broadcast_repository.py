"""Persistence helpers for broadcasts and their view receipts."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from anonyma.domain.entities import Broadcast
from anonyma.infrastructure.database import transaction
from anonyma.infrastructure.models import BroadcastModel, BroadcastViewModel
from anonyma.utils import ensure_app_timezone


class BroadcastRepository:
    """Provide creation, listing and view tracking for broadcasts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, broadcast: Broadcast) -> Broadcast:
        model = BroadcastModel(
            sender_id=None if broadcast.is_anonymous else broadcast.sender_id,
            content=broadcast.content,
            is_anonymous=broadcast.is_anonymous,
        )
        with transaction(self.session):
            self.session.add(model)
        self.session.refresh(model)
        return self._to_entity(model, view_count=0)

    def get(self, broadcast_id: int) -> Broadcast | None:
        model = self.session.get(BroadcastModel, broadcast_id)
        if model is None:
            return None
        counts = self._view_counts([model.id])
        return self._to_entity(model, view_count=counts.get(model.id, 0))

    def exists(self, broadcast_id: int) -> bool:
        return (
            self.session.query(BroadcastModel.id)
            .filter(BroadcastModel.id == broadcast_id)
            .first()
            is not None
        )

    def list(self, *, limit: int | None = 50) -> Sequence[Broadcast]:
        query = self.session.query(BroadcastModel).order_by(
            BroadcastModel.created_at.desc(), BroadcastModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        models = query.all()
        counts = self._view_counts([model.id for model in models])
        return [
            self._to_entity(model, view_count=counts.get(model.id, 0))
            for model in models
        ]

    def track_view(self, broadcast_id: int, user_id: int) -> bool:
        """Record that ``user_id`` saw the broadcast; return ``False`` if already seen."""

        already_seen = (
            self.session.query(BroadcastViewModel.id)
            .filter(
                BroadcastViewModel.broadcast_id == broadcast_id,
                BroadcastViewModel.user_id == user_id,
            )
            .first()
            is not None
        )
        if already_seen:
            return False
        try:
            with transaction(self.session):
                self.session.add(
                    BroadcastViewModel(broadcast_id=broadcast_id, user_id=user_id)
                )
        except IntegrityError:
            return False
        return True

    def _view_counts(self, broadcast_ids: Sequence[int]) -> dict[int, int]:
        if not broadcast_ids:
            return {}
        rows = (
            self.session.query(
                BroadcastViewModel.broadcast_id, func.count(BroadcastViewModel.id)
            )
            .filter(BroadcastViewModel.broadcast_id.in_(set(broadcast_ids)))
            .group_by(BroadcastViewModel.broadcast_id)
            .all()
        )
        return {broadcast_id: int(count) for broadcast_id, count in rows}

    @staticmethod
    def _to_entity(model: BroadcastModel, *, view_count: int) -> Broadcast:
        sender_username = None
        if not model.is_anonymous and model.sender is not None:
            sender_username = model.sender.username
        return Broadcast(
            id=model.id,
            sender_id=None if model.is_anonymous else model.sender_id,
            content=model.content,
            is_anonymous=bool(model.is_anonymous),
            created_at=ensure_app_timezone(model.created_at),
            sender_username=sender_username,
            view_count=view_count,
        )


__all__ = ["BroadcastRepository"]
