"""Use case for publishing a broadcast."""

import logging

from sqlalchemy.orm import Session

from anonyma.domain.entities import Broadcast, Identity, new_broadcast_event
from anonyma.domain.errors import InvalidInputError
from anonyma.infrastructure.notifications import (
    RealtimeEventPublisher,
    realtime_event_publisher,
)
from anonyma.infrastructure.repositories import BroadcastRepository

logger = logging.getLogger(__name__)


def create_broadcast(
    session: Session,
    *,
    identity: Identity,
    content: str,
    is_anonymous: bool = False,
    publisher: RealtimeEventPublisher | None = None,
) -> Broadcast:
    """Store a public post; anonymous posts keep no link to their author."""

    if content is None or not content.strip():
        raise InvalidInputError("La publicación no puede estar vacía")

    broadcast = BroadcastRepository(session).create(
        Broadcast(
            id=None,
            sender_id=None if is_anonymous else identity.user_id,
            content=content,
            is_anonymous=is_anonymous,
        )
    )
    logger.info("Broadcast %s created (anonymous: %s)", broadcast.id, is_anonymous)

    (publisher or realtime_event_publisher).dispatch_all(new_broadcast_event(broadcast.id))
    return broadcast
