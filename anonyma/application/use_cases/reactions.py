"""Use cases for emoji reactions on messages and comments."""

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from anonyma.domain.entities import (
    Comment,
    Identity,
    Message,
    ReactionSubject,
    ReactionSubjectType,
)
from anonyma.domain.errors import InvalidInputError, NotAParticipantError, NotFoundError
from anonyma.infrastructure.repositories import (
    CommentRepository,
    MessageRepository,
    ReactionRepository,
)

logger = logging.getLogger(__name__)

MAX_EMOJI_LENGTH = 32


def ensure_valid_emoji(emoji: str | None) -> str:
    normalized = (emoji or "").strip()
    if not normalized:
        raise InvalidInputError("La reacción no puede estar vacía")
    if len(normalized) > MAX_EMOJI_LENGTH:
        raise InvalidInputError(
            f"La reacción no puede superar {MAX_EMOJI_LENGTH} caracteres"
        )
    return normalized


def set_reaction(
    session: Session, *, subject: ReactionSubject, identity: Identity, emoji: str
) -> dict[str, int]:
    """Record the caller's reaction on ``subject``, replacing any previous one.

    Returns the subject's aggregate after the write.
    """

    emoji = ensure_valid_emoji(emoji)

    if subject.subject_type is ReactionSubjectType.MESSAGE:
        message = MessageRepository(session).get(subject.subject_id)
        if message is None:
            raise NotFoundError("Mensaje no encontrado")
        if not message.involves(identity.user_id):
            raise NotAParticipantError()
    else:
        if CommentRepository(session).get(subject.subject_id) is None:
            raise NotFoundError("Comentario no encontrado")

    repository = ReactionRepository(session)
    repository.set(subject, identity.user_id, emoji)
    logger.debug(
        "User %s reacted to %s %s",
        identity.user_id,
        subject.subject_type.value,
        subject.subject_id,
    )
    return repository.aggregate(subject) or {}


def get_aggregate(session: Session, subject: ReactionSubject) -> dict[str, int] | None:
    """Return ``{emoji: count}`` for ``subject`` or ``None`` when nobody reacted."""

    return ReactionRepository(session).aggregate(subject)


def attach_message_reactions(session: Session, messages: Sequence[Message]) -> list[Message]:
    aggregates = ReactionRepository(session).aggregate_many(
        ReactionSubjectType.MESSAGE, [message.id for message in messages]
    )
    for message in messages:
        message.reactions = aggregates.get(message.id)
    return list(messages)


def attach_comment_reactions(session: Session, comments: Sequence[Comment]) -> list[Comment]:
    aggregates = ReactionRepository(session).aggregate_many(
        ReactionSubjectType.COMMENT, [comment.id for comment in comments]
    )
    for comment in comments:
        comment.reactions = aggregates.get(comment.id)
    return list(comments)


__all__ = [
    "MAX_EMOJI_LENGTH",
    "attach_comment_reactions",
    "attach_message_reactions",
    "ensure_valid_emoji",
    "get_aggregate",
    "set_reaction",
]
