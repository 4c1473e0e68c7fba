"""Use case for registering users."""

import logging

from sqlalchemy.orm import Session

from anonyma.domain.entities import User
from anonyma.domain.errors import InvalidInputError
from anonyma.infrastructure.repositories import UserRepository
from anonyma.infrastructure.security import get_password_hash
from anonyma.utils import now_in_app_timezone

from .validators import ensure_valid_password, ensure_valid_username

logger = logging.getLogger(__name__)


def register_user(session: Session, *, username: str, password: str) -> User:
    """Create a new user ensuring unique usernames."""

    normalized = ensure_valid_username(username)
    ensure_valid_password(password)

    repository = UserRepository(session)
    if repository.get_by_username(normalized):
        raise InvalidInputError("El nombre de usuario ya está registrado")

    user = User(
        id=None,
        username=normalized,
        password=get_password_hash(password),
        created_at=now_in_app_timezone(),
        is_active=True,
    )
    created = repository.create(user)
    logger.info("Registered user %s", created.id)
    return created
