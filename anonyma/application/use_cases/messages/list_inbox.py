"""Use case for listing the messages a user received."""

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, Message
from anonyma.infrastructure.repositories import MessageRepository

from ..reactions import attach_message_reactions


def list_inbox(
    session: Session, *, identity: Identity, limit: int | None = None
) -> list[Message]:
    """Return received messages newest first without marking them as read."""

    messages = MessageRepository(session).list_inbox(identity.user_id, limit=limit)
    return attach_message_reactions(session, messages)
