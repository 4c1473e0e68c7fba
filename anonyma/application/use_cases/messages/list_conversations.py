"""Use case for listing the threads a user takes part in."""

from uuid import UUID

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, Message, ThreadSummary
from anonyma.infrastructure.repositories import MessageRepository, UserRepository

from ..reactions import attach_message_reactions


def list_conversations(session: Session, *, identity: Identity) -> list[ThreadSummary]:
    """Return one summary per thread, pinned first, then most recent activity.

    The counterpart's username is only disclosed when the caller wrote the
    latest message; otherwise the caller may be looking at an anonymous sender.
    """

    repository = MessageRepository(session)
    user_id = identity.user_id

    threads: dict[UUID, list[Message]] = {}
    for message in repository.list_participating(user_id):
        threads.setdefault(message.thread_id, []).append(message)

    latest_messages = [messages[-1] for messages in threads.values()]
    attach_message_reactions(session, latest_messages)

    recipients = UserRepository(session).get_map_by_ids(
        [latest.recipient_id for latest in latest_messages if latest.is_authored_by(user_id)]
    )
    pinned = repository.pinned_thread_ids(user_id)

    summaries = []
    for thread_id, messages in threads.items():
        latest = messages[-1]
        counterpart_username = None
        if latest.is_authored_by(user_id):
            recipient = recipients.get(latest.recipient_id)
            counterpart_username = recipient.username if recipient else None
        summaries.append(
            ThreadSummary(
                thread_id=thread_id,
                latest=latest,
                unread_count=sum(
                    1
                    for message in messages
                    if message.recipient_id == user_id and not message.is_read
                ),
                counterpart_username=counterpart_username,
                is_pinned=thread_id in pinned,
            )
        )

    summaries.sort(
        key=lambda summary: (
            summary.is_pinned,
            summary.latest.created_at,
            summary.latest.id,
        ),
        reverse=True,
    )
    return summaries
