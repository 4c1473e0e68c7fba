"""Rutas para publicaciones públicas y sus comentarios."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from anonyma.application.use_cases.broadcasts import (
    create_broadcast as create_broadcast_uc,
    create_comment as create_comment_uc,
    delete_comment as delete_comment_uc,
    list_broadcasts as list_broadcasts_uc,
    list_comments as list_comments_uc,
    view_broadcast as view_broadcast_uc,
)
from anonyma.application.use_cases.reactions import set_reaction
from anonyma.domain.entities import Broadcast, Comment, Identity, ReactionSubject
from anonyma.domain.errors import MessagingError
from anonyma.infrastructure.database import get_db
from anonyma.infrastructure.notifications import RealtimeEventPublisher
from anonyma.interfaces.api.dependencies import get_current_identity, get_event_publisher
from anonyma.interfaces.api.routes_helpers import to_http_exception
from anonyma.interfaces.api.schemas import (
    BroadcastCreate,
    BroadcastRead,
    BroadcastViewResponse,
    CommentCreate,
    CommentRead,
    ReactionAggregateRead,
    ReactionRequest,
)

router = APIRouter(prefix="/broadcasts", tags=["broadcasts"])


def _broadcast_to_schema(broadcast: Broadcast) -> BroadcastRead:
    return BroadcastRead.model_validate(broadcast)


def _comment_to_schema(comment: Comment) -> CommentRead:
    return CommentRead.model_validate(comment)


@router.post("", response_model=BroadcastRead, status_code=status.HTTP_201_CREATED)
def create_broadcast(
    payload: BroadcastCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    publisher: RealtimeEventPublisher = Depends(get_event_publisher),
):
    """Publica un mensaje visible para todos, opcionalmente anónimo."""

    try:
        broadcast = create_broadcast_uc(
            db,
            identity=identity,
            content=payload.content,
            is_anonymous=payload.is_anonymous,
            publisher=publisher,
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return _broadcast_to_schema(broadcast)


@router.get("", response_model=list[BroadcastRead])
def list_broadcasts(
    limit: int = Query(default=50, ge=1, le=100),
    db: Session = Depends(get_db),
    _: Identity = Depends(get_current_identity),
):
    """Devuelve las publicaciones más recientes."""

    return [_broadcast_to_schema(broadcast) for broadcast in list_broadcasts_uc(db, limit=limit)]


@router.post("/{broadcast_id}/view", response_model=BroadcastViewResponse)
def view_broadcast(
    broadcast_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        first_view = view_broadcast_uc(db, broadcast_id=broadcast_id, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return BroadcastViewResponse(broadcast_id=broadcast_id, first_view=first_view)


@router.get("/{broadcast_id}/comments", response_model=list[CommentRead])
def list_comments(
    broadcast_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(get_current_identity),
):
    """Devuelve los comentarios de la publicación en orden cronológico."""

    try:
        comments = list_comments_uc(db, broadcast_id=broadcast_id)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return [_comment_to_schema(comment) for comment in comments]


@router.post(
    "/{broadcast_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    broadcast_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    publisher: RealtimeEventPublisher = Depends(get_event_publisher),
):
    try:
        comment = create_comment_uc(
            db,
            broadcast_id=broadcast_id,
            identity=identity,
            content=payload.content,
            parent_comment_id=payload.parent_comment_id,
            publisher=publisher,
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return _comment_to_schema(comment)


@router.post("/comments/{comment_id}/react", response_model=ReactionAggregateRead)
def react_to_comment(
    comment_id: int,
    payload: ReactionRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        reactions = set_reaction(
            db,
            subject=ReactionSubject.comment(comment_id),
            identity=identity,
            emoji=payload.emoji,
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return ReactionAggregateRead(reactions=reactions)


@router.delete("/comments/{comment_id}/delete", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> Response:
    """Elimina un comentario propio."""

    try:
        delete_comment_uc(db, comment_id=comment_id, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
