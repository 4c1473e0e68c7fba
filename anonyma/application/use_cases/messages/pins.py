"""Use cases for pinning messages and threads."""

from uuid import UUID

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity
from anonyma.domain.errors import NotAParticipantError, NotFoundError
from anonyma.infrastructure.repositories import MessageRepository


def toggle_pin_message(session: Session, *, message_id: int, identity: Identity) -> bool:
    """Flip the pin of ``message_id`` for the caller and return the new state."""

    repository = MessageRepository(session)
    message = repository.get(message_id)
    if message is None:
        raise NotFoundError("Mensaje no encontrado")
    if not message.involves(identity.user_id):
        raise NotAParticipantError()
    return repository.toggle_message_pin(message_id, identity.user_id)


def toggle_pin_thread(session: Session, *, thread_id: UUID, identity: Identity) -> bool:
    repository = MessageRepository(session)
    if repository.latest_in_thread(thread_id) is None:
        raise NotFoundError("Conversación no encontrada")
    if not repository.is_thread_participant(thread_id, identity.user_id):
        raise NotAParticipantError()
    return repository.toggle_thread_pin(thread_id, identity.user_id)
