"""Use case for listing the users a caller can write to."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, User
from anonyma.infrastructure.repositories import UserRepository


def list_users(session: Session, *, identity: Identity) -> Sequence[User]:
    """Return every active user except the caller, newest first."""

    return UserRepository(session).list(exclude_id=identity.user_id)
