"""Use case for deleting the caller's own account."""

import logging

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity
from anonyma.infrastructure.repositories import UserRepository

from .get_user import get_user

logger = logging.getLogger(__name__)


def delete_account(session: Session, *, identity: Identity) -> None:
    """Delete the authenticated user; messages they sent remain, unattributed."""

    get_user(session, identity.user_id, include_inactive=True)
    UserRepository(session).delete(identity.user_id)
    logger.info("User %s deleted their account", identity.user_id)
