"""Use cases for editing a message and reading its edit history."""

import logging

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, Message, MessageEdit
from anonyma.domain.errors import ForbiddenError, NotFoundError
from anonyma.infrastructure.repositories import MessageRepository
from anonyma.utils import now_in_app_timezone

from .validators import ensure_message_content

logger = logging.getLogger(__name__)


def _get_own_message(
    repository: MessageRepository, message_id: int, identity: Identity
) -> Message:
    message = repository.get(message_id)
    if message is None:
        raise NotFoundError("Mensaje no encontrado")
    if not message.is_authored_by(identity.user_id):
        raise ForbiddenError("Solo el autor puede modificar este mensaje")
    return message


def edit_message(
    session: Session, *, message_id: int, identity: Identity, content: str
) -> Message:
    """Replace the content of an own message, keeping the previous one as history."""

    content = ensure_message_content(content)
    repository = MessageRepository(session)
    _get_own_message(repository, message_id, identity)

    updated = repository.update_content(
        message_id,
        content=content,
        edited_by=identity.user_id,
        edited_at=now_in_app_timezone(),
    )
    logger.info("Message %s edited", message_id)
    return updated


def list_edit_history(
    session: Session, *, message_id: int, identity: Identity
) -> list[MessageEdit]:
    repository = MessageRepository(session)
    _get_own_message(repository, message_id, identity)
    return repository.list_edits(message_id)
