"""Use cases for tombstoning messages and whole threads."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity
from anonyma.domain.errors import ForbiddenError, NotAParticipantError, NotFoundError
from anonyma.infrastructure.repositories import MessageRepository
from anonyma.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


def delete_message(session: Session, *, message_id: int, identity: Identity) -> None:
    """Soft-delete an own message; it disappears from every read path."""

    repository = MessageRepository(session)
    message = repository.get(message_id)
    if message is None:
        raise NotFoundError("Mensaje no encontrado")
    if not message.is_authored_by(identity.user_id):
        raise ForbiddenError("Solo el autor puede eliminar este mensaje")

    repository.tombstone(
        [message_id], deleted_by=identity.user_id, deleted_at=now_in_app_timezone()
    )
    logger.info("Message %s deleted", message_id)


def delete_thread(session: Session, *, thread_id: UUID, identity: Identity) -> int:
    """Soft-delete every active message of a thread the caller opened.

    Returns the number of messages removed.
    """

    repository = MessageRepository(session)
    messages = repository.list_thread(thread_id)
    if not messages:
        raise NotFoundError("Conversación no encontrada")
    if not any(message.involves(identity.user_id) for message in messages):
        raise NotAParticipantError()

    opening = repository.opening_message(thread_id)
    if opening is None or not opening.is_authored_by(identity.user_id):
        raise ForbiddenError("Solo quien inició la conversación puede eliminarla")

    removed = repository.tombstone(
        [message.id for message in messages],
        deleted_by=identity.user_id,
        deleted_at=now_in_app_timezone(),
    )
    logger.info("Thread %s deleted (%d messages)", thread_id, removed)
    return removed
