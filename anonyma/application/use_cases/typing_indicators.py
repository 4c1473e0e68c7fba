"""Use cases for the short-lived "is typing" signal."""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from anonyma.config import get_settings
from anonyma.domain.entities import Identity, Message, typing_event
from anonyma.domain.errors import NotAParticipantError, NotFoundError
from anonyma.infrastructure.notifications import (
    RealtimeEventPublisher,
    realtime_event_publisher,
)
from anonyma.infrastructure.repositories import MessageRepository, TypingRepository
from anonyma.utils import ensure_app_timezone, now_in_app_timezone, storage_cutoff

logger = logging.getLogger(__name__)


def _thread_counterpart(opening: Message, user_id: int) -> int | None:
    """Return the other participant as fixed by the thread's first message.

    Threads only ever have two participants; ``None`` means the other end is
    an unknown sender who cannot be notified.
    """

    if opening.recipient_id == user_id:
        return opening.sender_id
    return opening.recipient_id


def _require_participant(session: Session, thread_id: UUID, user_id: int) -> Message:
    repository = MessageRepository(session)
    opening = repository.opening_message(thread_id)
    if opening is None:
        raise NotFoundError("Conversación no encontrada")
    if not repository.is_thread_participant(thread_id, user_id):
        raise NotAParticipantError()
    return opening


def mark_typing(
    session: Session,
    *,
    thread_id: UUID,
    identity: Identity,
    now: datetime | None = None,
    publisher: RealtimeEventPublisher | None = None,
) -> int | None:
    """Record that the caller is typing and tell the other participant.

    The caller's identity is only included in the event when the caller did
    not open the thread, so an anonymous originator stays anonymous.
    Returns the notified user id, if any.
    """

    opening = _require_participant(session, thread_id, identity.user_id)
    started_at = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    TypingRepository(session).upsert(thread_id, identity.user_id, started_at)

    counterpart_id = _thread_counterpart(opening, identity.user_id)
    if counterpart_id is None:
        return None

    reveal = not opening.is_authored_by(identity.user_id)
    event = typing_event(
        thread_id,
        identity.user_id if reveal else None,
        identity.username if reveal else None,
    )
    (publisher or realtime_event_publisher).dispatch(counterpart_id, event)
    return counterpart_id


def list_typing_users(
    session: Session,
    *,
    thread_id: UUID,
    exclude_user_id: int | None = None,
    now: datetime | None = None,
) -> list[int]:
    """Return the users whose marker in ``thread_id`` is still live."""

    liveness = get_settings().typing_liveness_seconds
    reference = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    return [
        marker.user_id
        for marker in TypingRepository(session).list_for_thread(thread_id)
        if marker.user_id != exclude_user_id and marker.is_live(reference, liveness)
    ]


def is_counterpart_typing(
    session: Session,
    *,
    thread_id: UUID,
    identity: Identity,
    now: datetime | None = None,
) -> bool:
    _require_participant(session, thread_id, identity.user_id)
    return bool(
        list_typing_users(
            session, thread_id=thread_id, exclude_user_id=identity.user_id, now=now
        )
    )


def sweep_stale_markers(session: Session, *, now: datetime | None = None) -> int:
    """Delete markers older than the staleness window; return how many."""

    cutoff = storage_cutoff(now, get_settings().typing_staleness_seconds)
    removed = TypingRepository(session).delete_older_than(cutoff)
    if removed:
        logger.debug("Swept %d stale typing markers", removed)
    return removed


__all__ = [
    "is_counterpart_typing",
    "list_typing_users",
    "mark_typing",
    "sweep_stale_markers",
]
