"""Use case for reading a thread, which is also the read-receipt trigger."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, Message
from anonyma.domain.errors import NotAParticipantError
from anonyma.infrastructure.repositories import MessageRepository
from anonyma.utils import now_in_app_timezone

from ..reactions import attach_message_reactions

logger = logging.getLogger(__name__)


def get_thread_messages(
    session: Session, *, thread_id: UUID, identity: Identity
) -> list[Message]:
    """Return the thread oldest first and mark what the viewer just received as read.

    The returned messages reflect their state before this call. Only the
    messages included in the result are marked, so a message that arrives
    concurrently stays unread until the viewer actually fetches it.
    """

    repository = MessageRepository(session)
    messages = repository.list_thread(thread_id)
    viewer_id = identity.user_id

    if messages and not any(message.involves(viewer_id) for message in messages):
        raise NotAParticipantError()

    unread_ids = [
        message.id
        for message in messages
        if message.recipient_id == viewer_id and not message.is_read
    ]
    if unread_ids:
        marked = repository.mark_read(
            unread_ids, recipient_id=viewer_id, read_at=now_in_app_timezone()
        )
        logger.debug("Marked %d messages as read in thread %s", marked, thread_id)

    return attach_message_reactions(session, messages)
