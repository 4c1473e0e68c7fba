"""Use case for retrieving a single user."""

from sqlalchemy.orm import Session

from anonyma.domain.entities import User
from anonyma.domain.errors import NotFoundError
from anonyma.infrastructure.repositories import UserRepository


def get_user(session: Session, user_id: int, *, include_inactive: bool = False) -> User:
    """Return the requested user or raise an error if it does not exist."""

    user = UserRepository(session).get(user_id)
    if user is None or (not include_inactive and not user.is_active):
        raise NotFoundError("Usuario no encontrado")
    return user
