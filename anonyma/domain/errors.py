"""Exceptions raised by the messaging core.

Every failure a caller can act upon derives from :class:`MessagingError`.
Use cases raise them before mutating anything; the API layer translates them
into HTTP responses.
"""

from __future__ import annotations


class MessagingError(Exception):
    """Base class for expected failures of core operations."""

    default_message = "Operación no válida"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidInputError(MessagingError, ValueError):
    """Empty content, malformed identifiers or otherwise unusable input."""

    default_message = "Datos de entrada inválidos"


class NotAParticipantError(MessagingError):
    """The acting user is not one of the two ends of the thread."""

    default_message = "No participas en esta conversación"


class ForbiddenError(MessagingError):
    """The acting user is not entitled to the resource."""

    default_message = "No autorizado"


class AnonymousSenderError(MessagingError):
    """A reply target cannot be determined because the sender is unknown."""

    default_message = "No se puede responder a un remitente anónimo"


class NotFoundError(MessagingError):
    """The referenced message, thread, comment or user is absent or deleted."""

    default_message = "Recurso no encontrado"


class TransientStorageError(MessagingError):
    """The storage backend failed in a way that may succeed on retry."""

    default_message = "Almacenamiento no disponible temporalmente"


__all__ = [
    "MessagingError",
    "InvalidInputError",
    "NotAParticipantError",
    "ForbiddenError",
    "AnonymousSenderError",
    "NotFoundError",
    "TransientStorageError",
]
