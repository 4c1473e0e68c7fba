"""Use case for opening a new thread with a first message."""

import logging
from uuid import uuid4

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, Message, new_message_event
from anonyma.domain.errors import ForbiddenError, InvalidInputError, NotFoundError
from anonyma.infrastructure.notifications import (
    RealtimeEventPublisher,
    realtime_event_publisher,
)
from anonyma.infrastructure.repositories import (
    MessageRepository,
    UserBlockRepository,
    UserRepository,
)

from .validators import ensure_message_content

logger = logging.getLogger(__name__)


def create_message(
    session: Session,
    *,
    sender: Identity | None,
    recipient_id: int,
    content: str,
    publisher: RealtimeEventPublisher | None = None,
) -> Message:
    """Store a message to ``recipient_id`` in a freshly allocated thread.

    ``sender`` is ``None`` for unauthenticated sends; the message is then
    stored without any sender and nobody can ever reply to it.
    """

    content = ensure_message_content(content)
    sender_id = sender.user_id if sender is not None else None
    if sender_id is not None and sender_id == recipient_id:
        raise InvalidInputError("No puedes enviarte mensajes a ti mismo")

    recipient = UserRepository(session).get(recipient_id)
    if recipient is None or not recipient.is_active:
        raise NotFoundError("Destinatario no encontrado")

    if sender_id is not None and UserBlockRepository(session).is_blocked(
        blocker_id=recipient_id, blocked_id=sender_id
    ):
        logger.warning("Message to user %s rejected: sender is blocked", recipient_id)
        raise ForbiddenError("El destinatario no acepta tus mensajes")

    message = MessageRepository(session).create(
        Message(
            id=None,
            thread_id=uuid4(),
            sender_id=sender_id,
            recipient_id=recipient_id,
            content=content,
        )
    )
    logger.info(
        "Message %s opened thread %s for user %s", message.id, message.thread_id, recipient_id
    )

    (publisher or realtime_event_publisher).dispatch(
        recipient_id, new_message_event(message.id, message.thread_id, message.content)
    )
    return message
