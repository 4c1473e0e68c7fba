"""Use cases for commenting on broadcasts."""

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from anonyma.domain.entities import Comment, Identity, new_comment_event
from anonyma.domain.errors import ForbiddenError, InvalidInputError, NotFoundError
from anonyma.infrastructure.notifications import (
    RealtimeEventPublisher,
    realtime_event_publisher,
)
from anonyma.infrastructure.repositories import BroadcastRepository, CommentRepository
from anonyma.utils import now_in_app_timezone

from ..reactions import attach_comment_reactions

logger = logging.getLogger(__name__)


def _require_broadcast(session: Session, broadcast_id: int) -> None:
    if not BroadcastRepository(session).exists(broadcast_id):
        raise NotFoundError("Publicación no encontrada")


def create_comment(
    session: Session,
    *,
    broadcast_id: int,
    identity: Identity,
    content: str,
    parent_comment_id: int | None = None,
    publisher: RealtimeEventPublisher | None = None,
) -> Comment:
    if content is None or not content.strip():
        raise InvalidInputError("El comentario no puede estar vacío")
    _require_broadcast(session, broadcast_id)

    repository = CommentRepository(session)
    if parent_comment_id is not None:
        parent = repository.get(parent_comment_id)
        if parent is None:
            raise NotFoundError("Comentario no encontrado")
        if parent.broadcast_id != broadcast_id:
            raise InvalidInputError("El comentario pertenece a otra publicación")

    comment = repository.create(
        Comment(
            id=None,
            broadcast_id=broadcast_id,
            user_id=identity.user_id,
            content=content,
            parent_comment_id=parent_comment_id,
        )
    )
    logger.info("Comment %s added to broadcast %s", comment.id, broadcast_id)

    (publisher or realtime_event_publisher).dispatch_all(
        new_comment_event(broadcast_id, comment.id)
    )
    return comment


def list_comments(session: Session, *, broadcast_id: int) -> Sequence[Comment]:
    """Return the active comments of a broadcast oldest first, with reactions."""

    _require_broadcast(session, broadcast_id)
    comments = CommentRepository(session).list_for_broadcast(broadcast_id)
    return attach_comment_reactions(session, comments)


def delete_comment(session: Session, *, comment_id: int, identity: Identity) -> None:
    repository = CommentRepository(session)
    comment = repository.get(comment_id)
    if comment is None:
        raise NotFoundError("Comentario no encontrado")
    if comment.user_id != identity.user_id:
        raise ForbiddenError("Solo el autor puede eliminar este comentario")
    repository.soft_delete(comment_id, deleted_at=now_in_app_timezone())
