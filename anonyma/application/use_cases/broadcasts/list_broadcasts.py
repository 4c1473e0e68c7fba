"""Use cases for reading broadcasts and recording views."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from anonyma.domain.entities import Broadcast, Identity
from anonyma.domain.errors import NotFoundError
from anonyma.infrastructure.repositories import BroadcastRepository

DEFAULT_BROADCAST_LIMIT = 50
MAX_BROADCAST_LIMIT = 100


def list_broadcasts(
    session: Session, *, limit: int | None = DEFAULT_BROADCAST_LIMIT
) -> Sequence[Broadcast]:
    """Return the most recent broadcasts with their view counts."""

    if limit is None:
        limit = DEFAULT_BROADCAST_LIMIT
    limit = max(1, min(limit, MAX_BROADCAST_LIMIT))
    return BroadcastRepository(session).list(limit=limit)


def view_broadcast(session: Session, *, broadcast_id: int, identity: Identity) -> bool:
    """Count the caller as a viewer once; return ``True`` on the first view."""

    repository = BroadcastRepository(session)
    if not repository.exists(broadcast_id):
        raise NotFoundError("Publicación no encontrada")
    return repository.track_view(broadcast_id, identity.user_id)
