"""Use case for searching the caller's own messages."""

from sqlalchemy.orm import Session

from anonyma.domain.entities import Identity, Message
from anonyma.infrastructure.repositories import MessageRepository

from ..reactions import attach_message_reactions
from .validators import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT, clamp_limit


def search_messages(
    session: Session,
    *,
    identity: Identity,
    query: str,
    limit: int | None = DEFAULT_SEARCH_LIMIT,
) -> list[Message]:
    """Return sent or received messages containing ``query``, newest first."""

    text = (query or "").strip()
    if not text:
        return []

    messages = MessageRepository(session).search(
        identity.user_id,
        text,
        limit=clamp_limit(limit, default=DEFAULT_SEARCH_LIMIT, maximum=MAX_SEARCH_LIMIT),
    )
    return attach_message_reactions(session, messages)
