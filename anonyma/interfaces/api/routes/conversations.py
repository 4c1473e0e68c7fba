"""Rutas para consultar conversaciones, responder y el indicador de escritura."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from anonyma.application.use_cases.messages import (
    create_reply as create_reply_uc,
    delete_thread as delete_thread_uc,
    get_thread_messages as get_thread_messages_uc,
    list_conversations as list_conversations_uc,
    toggle_pin_thread as toggle_pin_thread_uc,
)
from anonyma.application.use_cases.typing_indicators import (
    is_counterpart_typing,
    mark_typing,
)
from anonyma.domain.entities import Identity, ThreadSummary
from anonyma.domain.errors import MessagingError
from anonyma.infrastructure.database import get_db
from anonyma.infrastructure.notifications import RealtimeEventPublisher
from anonyma.interfaces.api.dependencies import get_current_identity, get_event_publisher
from anonyma.interfaces.api.routes_helpers import message_to_schema, to_http_exception
from anonyma.interfaces.api.schemas import (
    ConversationRead,
    MessageRead,
    PinStatusResponse,
    ReplyCreate,
    ThreadDeletedResponse,
    TypingStatusRead,
)

router = APIRouter(prefix="/conversations", tags=["conversations"])


def _summary_to_schema(summary: ThreadSummary, viewer_id: int) -> ConversationRead:
    return ConversationRead(
        thread_id=summary.thread_id,
        latest=message_to_schema(summary.latest, viewer_id),
        unread_count=summary.unread_count,
        counterpart_username=summary.counterpart_username,
        is_pinned=summary.is_pinned,
    )


@router.get("", response_model=list[ConversationRead], response_model_exclude_none=True)
def list_conversations(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Devuelve una fila por conversación, primero las fijadas."""

    summaries = list_conversations_uc(db, identity=identity)
    return [_summary_to_schema(summary, identity.user_id) for summary in summaries]


@router.get(
    "/{thread_id}", response_model=list[MessageRead], response_model_exclude_none=True
)
def get_thread_messages(
    thread_id: UUID,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Devuelve los mensajes de la conversación y marca como leídos los recibidos."""

    try:
        messages = get_thread_messages_uc(db, thread_id=thread_id, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return [message_to_schema(message, identity.user_id) for message in messages]


@router.post(
    "/{thread_id}/reply",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
)
def reply_in_thread(
    thread_id: UUID,
    payload: ReplyCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    publisher: RealtimeEventPublisher = Depends(get_event_publisher),
):
    """Responde al otro participante de la conversación."""

    try:
        message = create_reply_uc(
            db,
            thread_id=thread_id,
            identity=identity,
            content=payload.content,
            publisher=publisher,
        )
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return message_to_schema(message, identity.user_id)


@router.delete("/{thread_id}/delete", response_model=ThreadDeletedResponse)
def delete_thread(
    thread_id: UUID,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Elimina la conversación completa; solo quien la inició puede hacerlo."""

    try:
        removed = delete_thread_uc(db, thread_id=thread_id, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return ThreadDeletedResponse(thread_id=thread_id, deleted_messages=removed)


@router.post("/{thread_id}/pin", response_model=PinStatusResponse)
def toggle_pin_thread(
    thread_id: UUID,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        pinned = toggle_pin_thread_uc(db, thread_id=thread_id, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return PinStatusResponse(pinned=pinned)


@router.post("/{thread_id}/typing", status_code=status.HTTP_204_NO_CONTENT)
def notify_typing(
    thread_id: UUID,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    publisher: RealtimeEventPublisher = Depends(get_event_publisher),
) -> Response:
    """Indica que el usuario está escribiendo en la conversación."""

    try:
        mark_typing(db, thread_id=thread_id, identity=identity, publisher=publisher)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{thread_id}/typing", response_model=TypingStatusRead)
def read_typing_status(
    thread_id: UUID,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Indica si el otro participante está escribiendo en este momento."""

    try:
        is_typing = is_counterpart_typing(db, thread_id=thread_id, identity=identity)
    except MessagingError as exc:
        raise to_http_exception(exc) from exc
    return TypingStatusRead(is_typing=is_typing)
