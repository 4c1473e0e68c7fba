"""Use cases for replying inside an existing thread."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, Message, new_message_event
from anonyma.domain.errors import (
    AnonymousSenderError,
    ForbiddenError,
    NotAParticipantError,
    NotFoundError,
)
from anonyma.infrastructure.notifications import (
    RealtimeEventPublisher,
    realtime_event_publisher,
)
from anonyma.infrastructure.repositories import MessageRepository, UserBlockRepository

from .validators import ensure_message_content

logger = logging.getLogger(__name__)


def resolve_reply_recipient(latest: Message, actor_id: int) -> int:
    """Return who a reply from ``actor_id`` goes to, given the thread's latest message."""

    if latest.recipient_id == actor_id:
        if latest.sender_id is None:
            raise AnonymousSenderError()
        return latest.sender_id
    if latest.is_authored_by(actor_id):
        return latest.recipient_id
    raise NotAParticipantError()


def create_reply(
    session: Session,
    *,
    thread_id: UUID,
    identity: Identity,
    content: str,
    publisher: RealtimeEventPublisher | None = None,
) -> Message:
    """Append a reply to ``thread_id`` addressed to the other participant."""

    content = ensure_message_content(content)
    repository = MessageRepository(session)

    latest = repository.latest_in_thread(thread_id)
    if latest is None:
        raise NotFoundError("Conversación no encontrada")

    recipient_id = resolve_reply_recipient(latest, identity.user_id)

    if UserBlockRepository(session).is_blocked(
        blocker_id=recipient_id, blocked_id=identity.user_id
    ):
        logger.warning("Reply in thread %s rejected: sender is blocked", thread_id)
        raise ForbiddenError("El destinatario no acepta tus mensajes")

    message = repository.create(
        Message(
            id=None,
            thread_id=thread_id,
            sender_id=identity.user_id,
            recipient_id=recipient_id,
            content=content,
        )
    )
    logger.info("Reply %s routed in thread %s", message.id, thread_id)

    (publisher or realtime_event_publisher).dispatch(
        recipient_id, new_message_event(message.id, thread_id, message.content)
    )
    return message


def reply_to_message(
    session: Session,
    *,
    message_id: int,
    identity: Identity,
    content: str,
    publisher: RealtimeEventPublisher | None = None,
) -> Message:
    """Reply in the thread that ``message_id`` belongs to."""

    target = MessageRepository(session).get(message_id)
    if target is None:
        raise NotFoundError("Mensaje no encontrado")
    return create_reply(
        session,
        thread_id=target.thread_id,
        identity=identity,
        content=content,
        publisher=publisher,
    )
