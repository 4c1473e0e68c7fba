"""Persistence helpers for emoji reactions."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from anonyma.domain.entities import ReactionSubject, ReactionSubjectType
from anonyma.infrastructure.database import transaction
from anonyma.infrastructure.models import ReactionModel
from anonyma.utils import now_in_app_naive_datetime


class ReactionRepository:
    """Store one emoji per (subject, user) and aggregate them per subject."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def set(self, subject: ReactionSubject, user_id: int, emoji: str) -> None:
        """Insert or overwrite the reaction of ``user_id`` on ``subject``.

        Two concurrent first reactions race on the unique constraint; the
        loser retries as an update so the last write wins.
        """

        try:
            self._upsert(subject, user_id, emoji)
        except IntegrityError:
            self._upsert(subject, user_id, emoji)

    def aggregate(self, subject: ReactionSubject) -> dict[str, int] | None:
        aggregates = self.aggregate_many(subject.subject_type, [subject.subject_id])
        return aggregates.get(subject.subject_id)

    def aggregate_many(
        self, subject_type: ReactionSubjectType, subject_ids: Sequence[int]
    ) -> dict[int, dict[str, int]]:
        """Return ``{subject_id: {emoji: count}}`` for the subjects with reactions."""

        if not subject_ids:
            return {}

        rows = (
            self.session.query(
                ReactionModel.subject_id,
                ReactionModel.emoji,
                func.count(ReactionModel.id),
            )
            .filter(
                ReactionModel.subject_type == subject_type.value,
                ReactionModel.subject_id.in_(set(subject_ids)),
            )
            .group_by(ReactionModel.subject_id, ReactionModel.emoji)
            .all()
        )
        aggregates: dict[int, dict[str, int]] = {}
        for subject_id, emoji, count in rows:
            aggregates.setdefault(subject_id, {})[emoji] = int(count)
        return aggregates

    def _upsert(self, subject: ReactionSubject, user_id: int, emoji: str) -> None:
        with transaction(self.session):
            model = (
                self._query_for(subject)
                .filter(ReactionModel.user_id == user_id)
                .with_for_update()
                .first()
            )
            if model is None:
                self.session.add(
                    ReactionModel(
                        subject_type=subject.subject_type.value,
                        subject_id=subject.subject_id,
                        user_id=user_id,
                        emoji=emoji,
                    )
                )
            else:
                model.emoji = emoji
                model.updated_at = now_in_app_naive_datetime()

    def _query_for(self, subject: ReactionSubject):
        return self.session.query(ReactionModel).filter(
            ReactionModel.subject_type == subject.subject_type.value,
            ReactionModel.subject_id == subject.subject_id,
        )


__all__ = ["ReactionRepository"]
