"""Use cases for blocking and unblocking other users."""

import logging

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity
from anonyma.domain.errors import InvalidInputError
from anonyma.infrastructure.repositories import UserBlockRepository

from .get_user import get_user

logger = logging.getLogger(__name__)


def block_user(session: Session, *, identity: Identity, user_id: int) -> None:
    """Stop ``user_id`` from starting threads with or replying to ``identity``."""

    if user_id == identity.user_id:
        raise InvalidInputError("No puedes bloquearte a ti mismo")
    get_user(session, user_id, include_inactive=True)
    UserBlockRepository(session).block(blocker_id=identity.user_id, blocked_id=user_id)
    logger.info("User %s blocked user %s", identity.user_id, user_id)


def unblock_user(session: Session, *, identity: Identity, user_id: int) -> None:
    UserBlockRepository(session).unblock(blocker_id=identity.user_id, blocked_id=user_id)


def list_blocked_users(session: Session, *, identity: Identity) -> list[int]:
    return UserBlockRepository(session).list_blocked_ids(identity.user_id)
