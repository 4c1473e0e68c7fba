"""Persistence layer for user data, user blocks and stored preferences."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from anonyma.domain.entities import ReactionSubjectType, User, UserPreferences
from anonyma.domain.errors import InvalidInputError
from anonyma.infrastructure.database import transaction
from anonyma.infrastructure.models import (
    BroadcastCommentModel,
    BroadcastModel,
    BroadcastViewModel,
    MessageEditModel,
    MessageModel,
    PinnedMessageModel,
    PinnedThreadModel,
    ReactionModel,
    TypingIndicatorModel,
    UserBlockModel,
    UserModel,
    UserPreferenceModel,
)
from anonyma.utils import ensure_app_timezone


class UserRepository:
    """Provide lookup, creation and removal operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, *, exclude_id: int | None = None) -> Sequence[User]:
        query = (
            self.session.query(UserModel)
            .filter(UserModel.is_active.is_(True))
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
        )
        if exclude_id is not None:
            query = query.filter(UserModel.id != exclude_id)
        return [self._to_entity(model) for model in query.all()]

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_username(self, username: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(func.lower(UserModel.username) == username.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            username=user.username,
            password=user.password,
            is_active=user.is_active,
            bio=user.bio,
            avatar_url=user.avatar_url,
        )
        try:
            with transaction(self.session):
                self.session.add(model)
        except IntegrityError as exc:
            raise InvalidInputError("El nombre de usuario ya está registrado") from exc
        self.session.refresh(model)
        return self._to_entity(model)

    def update_profile(self, user: User) -> User:
        model = self.session.get(UserModel, user.id)
        if model is None:
            msg = f"User with id {user.id} not found"
            raise ValueError(msg)
        try:
            with transaction(self.session):
                model.username = user.username
                model.bio = user.bio
                model.avatar_url = user.avatar_url
                self.session.add(model)
        except IntegrityError as exc:
            raise InvalidInputError("El nombre de usuario ya está registrado") from exc
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, user_id: int) -> None:
        """Remove ``user_id`` and everything that only made sense with it.

        Messages the user sent and broadcasts they posted stay behind with no
        sender. Messages they received go away together with their edits,
        pins and reactions, as do the user's own comments and the replies
        hanging from them.
        """

        with transaction(self.session):
            received_ids = [
                message_id
                for (message_id,) in self.session.query(MessageModel.id)
                .filter(MessageModel.recipient_id == user_id)
                .all()
            ]
            if received_ids:
                self._delete_message_rows(received_ids)

            self.session.query(MessageModel).filter(
                MessageModel.sender_id == user_id
            ).update({MessageModel.sender_id: None}, synchronize_session=False)
            self.session.query(MessageModel).filter(
                MessageModel.deleted_by == user_id
            ).update({MessageModel.deleted_by: None}, synchronize_session=False)
            self.session.query(BroadcastModel).filter(
                BroadcastModel.sender_id == user_id
            ).update({BroadcastModel.sender_id: None}, synchronize_session=False)

            comment_ids = self._comment_tree_ids(user_id)
            if comment_ids:
                self.session.query(ReactionModel).filter(
                    ReactionModel.subject_type == ReactionSubjectType.COMMENT.value,
                    ReactionModel.subject_id.in_(comment_ids),
                ).delete(synchronize_session=False)
                self.session.query(BroadcastCommentModel).filter(
                    BroadcastCommentModel.id.in_(comment_ids)
                ).delete(synchronize_session=False)

            for model, column in (
                (MessageEditModel, MessageEditModel.edited_by),
                (PinnedMessageModel, PinnedMessageModel.user_id),
                (PinnedThreadModel, PinnedThreadModel.user_id),
                (ReactionModel, ReactionModel.user_id),
                (TypingIndicatorModel, TypingIndicatorModel.user_id),
                (BroadcastViewModel, BroadcastViewModel.user_id),
                (UserPreferenceModel, UserPreferenceModel.user_id),
            ):
                self.session.query(model).filter(column == user_id).delete(
                    synchronize_session=False
                )
            self.session.query(UserBlockModel).filter(
                or_(
                    UserBlockModel.blocker_id == user_id,
                    UserBlockModel.blocked_id == user_id,
                )
            ).delete(synchronize_session=False)
            self.session.query(UserModel).filter(UserModel.id == user_id).delete(
                synchronize_session=False
            )

    def get_map_by_ids(self, user_ids: Sequence[int]) -> dict[int, User]:
        if not user_ids:
            return {}

        unique_ids = {int(user_id) for user_id in user_ids}
        query = self.session.query(UserModel).filter(UserModel.id.in_(unique_ids))
        return {model.id: self._to_entity(model) for model in query.all()}

    def _delete_message_rows(self, message_ids: list[int]) -> None:
        self.session.query(ReactionModel).filter(
            ReactionModel.subject_type == ReactionSubjectType.MESSAGE.value,
            ReactionModel.subject_id.in_(message_ids),
        ).delete(synchronize_session=False)
        for model in (MessageEditModel, PinnedMessageModel):
            self.session.query(model).filter(
                model.message_id.in_(message_ids)
            ).delete(synchronize_session=False)
        self.session.query(MessageModel).filter(
            MessageModel.id.in_(message_ids)
        ).delete(synchronize_session=False)

    def _comment_tree_ids(self, user_id: int) -> list[int]:
        collected = {
            comment_id
            for (comment_id,) in self.session.query(BroadcastCommentModel.id)
            .filter(BroadcastCommentModel.user_id == user_id)
            .all()
        }
        frontier = set(collected)
        while frontier:
            children = {
                comment_id
                for (comment_id,) in self.session.query(BroadcastCommentModel.id)
                .filter(BroadcastCommentModel.parent_comment_id.in_(frontier))
                .all()
            }
            frontier = children - collected
            collected |= frontier
        return sorted(collected)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            password=model.password,
            created_at=ensure_app_timezone(model.created_at),
            is_active=model.is_active,
            bio=model.bio,
            avatar_url=model.avatar_url,
        )


class UserBlockRepository:
    """Store which users refuse messages from which others."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def is_blocked(self, *, blocker_id: int, blocked_id: int) -> bool:
        return (
            self.session.query(UserBlockModel.id)
            .filter(
                UserBlockModel.blocker_id == blocker_id,
                UserBlockModel.blocked_id == blocked_id,
            )
            .first()
            is not None
        )

    def block(self, *, blocker_id: int, blocked_id: int) -> None:
        if self.is_blocked(blocker_id=blocker_id, blocked_id=blocked_id):
            return
        try:
            with transaction(self.session):
                self.session.add(
                    UserBlockModel(blocker_id=blocker_id, blocked_id=blocked_id)
                )
        except IntegrityError:
            # Concurrent block of the same pair; the row exists either way.
            return

    def unblock(self, *, blocker_id: int, blocked_id: int) -> None:
        with transaction(self.session):
            self.session.query(UserBlockModel).filter(
                UserBlockModel.blocker_id == blocker_id,
                UserBlockModel.blocked_id == blocked_id,
            ).delete(synchronize_session=False)

    def list_blocked_ids(self, blocker_id: int) -> list[int]:
        query = (
            self.session.query(UserBlockModel.blocked_id)
            .filter(UserBlockModel.blocker_id == blocker_id)
            .order_by(UserBlockModel.created_at.desc(), UserBlockModel.id.desc())
        )
        return [blocked_id for (blocked_id,) in query.all()]


class UserPreferenceRepository:
    """Read and upsert the per-user display preferences row."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> UserPreferences | None:
        model = self.session.get(UserPreferenceModel, user_id)
        return self._to_entity(model) if model else None

    def save(self, preferences: UserPreferences) -> UserPreferences:
        model = self.session.get(UserPreferenceModel, preferences.user_id)
        if model is None:
            model = UserPreferenceModel(user_id=preferences.user_id)
        model.theme = preferences.theme
        model.notification_sound = preferences.notification_sound
        model.browser_notifications = preferences.browser_notifications
        model.show_read_receipts = preferences.show_read_receipts
        model.show_typing_indicators = preferences.show_typing_indicators
        with transaction(self.session):
            self.session.add(model)
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserPreferenceModel) -> UserPreferences:
        return UserPreferences(
            user_id=model.user_id,
            theme=model.theme,
            notification_sound=model.notification_sound,
            browser_notifications=model.browser_notifications,
            show_read_receipts=model.show_read_receipts,
            show_typing_indicators=model.show_typing_indicators,
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["UserRepository", "UserBlockRepository", "UserPreferenceRepository"]
