"""Use case for updating the caller's public profile."""

import logging
from dataclasses import replace

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, User
from anonyma.domain.errors import InvalidInputError
from anonyma.infrastructure.repositories import UserRepository

from .get_user import get_user
from .validators import ensure_valid_avatar_url, ensure_valid_bio, ensure_valid_username

logger = logging.getLogger(__name__)


def update_profile(
    session: Session,
    *,
    identity: Identity,
    username: str | None = None,
    bio: str | None = None,
    avatar_url: str | None = None,
) -> User:
    """Apply the provided fields; ``None`` keeps the stored value."""

    repository = UserRepository(session)
    current_user = get_user(session, identity.user_id)

    new_username = current_user.username
    if username is not None:
        normalized = ensure_valid_username(username)
        existing = repository.get_by_username(normalized)
        if existing and existing.id != current_user.id:
            raise InvalidInputError("El nombre de usuario ya está registrado")
        new_username = normalized

    updated_user = replace(
        current_user,
        username=new_username,
        bio=ensure_valid_bio(bio) if bio is not None else current_user.bio,
        avatar_url=(
            ensure_valid_avatar_url(avatar_url)
            if avatar_url is not None
            else current_user.avatar_url
        ),
    )
    saved = repository.update_profile(updated_user)
    logger.info("User %s updated their profile", saved.id)
    return saved
