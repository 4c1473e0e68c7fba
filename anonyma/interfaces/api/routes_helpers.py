"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from anonyma.domain.entities import Message
from anonyma.domain.errors import (
    AnonymousSenderError,
    ForbiddenError,
    InvalidInputError,
    MessagingError,
    NotAParticipantError,
    NotFoundError,
    TransientStorageError,
)
from anonyma.interfaces.api.schemas import MessageRead

_STATUS_BY_ERROR: tuple[tuple[type[MessagingError], int], ...] = (
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (AnonymousSenderError, status.HTTP_400_BAD_REQUEST),
    (NotAParticipantError, status.HTTP_403_FORBIDDEN),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (TransientStorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def to_http_exception(exc: MessagingError) -> HTTPException:
    """Return the HTTP error matching a core failure."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)


def message_to_schema(message: Message, viewer_id: int) -> MessageRead:
    """Serialize ``message`` for ``viewer_id`` without exposing either participant."""

    return MessageRead(
        id=message.id or 0,
        thread_id=message.thread_id,
        content=message.content,
        created_at=message.created_at,
        is_read=message.is_read,
        read_at=message.read_at,
        is_mine=message.is_authored_by(viewer_id),
        is_edited=message.is_edited,
        edited_at=message.edited_at,
        reactions=message.reactions,
    )


__all__ = ["message_to_schema", "to_http_exception"]
