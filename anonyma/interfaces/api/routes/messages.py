"""Rutas para enviar, responder, editar y buscar mensajes directos."""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from anonyma.application.use_cases.messages import (
    create_message as create_message_uc,
    delete_message as delete_message_uc,
    edit_message as edit_message_uc,
    list_edit_history as list_edit_history_uc,
    list_inbox as list_inbox_uc,
    reply_to_message as reply_to_message_uc,
    search_messages as search_messages_uc,
    toggle_pin_message as toggle_pin_message_uc,
)
from anonyma.application.use_cases.reactions import set_reaction
from anonyma.domain.entities import Identity, MessageEdit, ReactionSubject
from anonyma.domain.errors import MessagingError
from anonyma.infrastructure.database import get_db
from anonyma.infrastructure.notifications import RealtimeEventPublisher
from anonyma.interfaces.api.dependencies import (
    get_current_identity,
    get_event_publisher,
    get_optional_identity,
)
from anonyma.interfaces.api.routes_helpers import message_to_schema, to_http_exception
from anonyma.interfaces.api.schemas import (
    MessageCreate,
    MessageCreated,
    MessageEditRead,
    MessageEditRequest,
    MessageRead,
    PinStatusResponse,
    ReactionAggregateRead,
    ReactionRequest,
    ReplyCreate,
)

router = APIRouter(prefix="/messages", tags=["messages"])
logger = logging.getLogger(__name__)


def _edit_to_schema(edit: MessageEdit) -> MessageEditRead:
    return MessageEditRead(
        id=edit.id or 0,
        message_id=edit.message_id,
        old_content=edit.old_content,
        edited_at=edit.edited_at,
    )


@router.post("", response_model=MessageCreated, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    sender: Identity | None = Depends(get_optional_identity),
    publisher: RealtimeEventPublisher = Depends(get_event_publisher),
):
    """Inicia una conversación nueva; sin token el remitente queda en el anonimato."""

    try:
        message = create_message_uc(
            db,
            sender=sender,
            recipient_id=payload.recipient_id,
            content=payload.content,
            publisher=publisher,
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return MessageCreated(message_id=message.id, thread_id=message.thread_id)


@router.get(
    "/inbox", response_model=list[MessageRead], response_model_exclude_none=True
)
def list_inbox(
    limit: int | None = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Devuelve los mensajes recibidos, del más reciente al más antiguo."""

    messages = list_inbox_uc(db, identity=identity, limit=limit)
    return [message_to_schema(message, identity.user_id) for message in messages]


@router.get(
    "/search", response_model=list[MessageRead], response_model_exclude_none=True
)
def search_messages(
    q: str = Query(default="", description="Texto a buscar"),
    limit: int | None = Query(default=None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Busca en los mensajes enviados y recibidos por el usuario."""

    messages = search_messages_uc(db, identity=identity, query=q, limit=limit)
    return [message_to_schema(message, identity.user_id) for message in messages]


@router.post(
    "/{message_id}/reply",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
)
def reply_to_message(
    message_id: int,
    payload: ReplyCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    publisher: RealtimeEventPublisher = Depends(get_event_publisher),
):
    """Responde dentro de la conversación a la que pertenece el mensaje."""

    try:
        message = reply_to_message_uc(
            db,
            message_id=message_id,
            identity=identity,
            content=payload.content,
            publisher=publisher,
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return message_to_schema(message, identity.user_id)


@router.post("/{message_id}/react", response_model=ReactionAggregateRead)
def react_to_message(
    message_id: int,
    payload: ReactionRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Registra o reemplaza la reacción del usuario sobre el mensaje."""

    try:
        reactions = set_reaction(
            db,
            subject=ReactionSubject.message(message_id),
            identity=identity,
            emoji=payload.emoji,
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return ReactionAggregateRead(reactions=reactions)


@router.post("/{message_id}/edit", response_model=MessageRead)
def edit_message(
    message_id: int,
    payload: MessageEditRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Edita un mensaje propio conservando el contenido anterior."""

    try:
        message = edit_message_uc(
            db, message_id=message_id, identity=identity, content=payload.content
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return message_to_schema(message, identity.user_id)


@router.get("/{message_id}/history", response_model=list[MessageEditRead])
def list_edit_history(
    message_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        edits = list_edit_history_uc(db, message_id=message_id, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return [_edit_to_schema(edit) for edit in edits]


@router.delete("/{message_id}/delete", status_code=status.HTTP_204_NO_CONTENT)
def delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> Response:
    """Elimina un mensaje propio."""

    try:
        delete_message_uc(db, message_id=message_id, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{message_id}/pin", response_model=PinStatusResponse)
def toggle_pin_message(
    message_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        pinned = toggle_pin_message_uc(db, message_id=message_id, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return PinStatusResponse(pinned=pinned)
