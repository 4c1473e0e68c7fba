"""Helpers to push live events to connected clients through the hub."""

from __future__ import annotations

import copy
import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from anonyma.domain.entities import Event

from .hub import NotificationHub, notification_hub

logger = logging.getLogger(__name__)


class RealtimeEventPublisher:
    """Serialize events and hand them to the hub, fire and forget.

    Called only after the corresponding state change has been committed, so
    a dropped event never hides data: clients can always pull it again.
    """

    def __init__(self, hub: NotificationHub) -> None:
        self._hub = hub

    def dispatch(self, user_id: int | None, event: Event) -> int:
        """Deliver ``event`` to the live connections of ``user_id``."""

        if not user_id:
            return 0
        delivered = self._hub.publish_to(user_id, serialize_event(event))
        logger.debug(
            "Event %s delivered to %d receivers of user %s",
            event.event_type,
            delivered,
            user_id,
        )
        return delivered

    def dispatch_all(self, event: Event) -> int:
        """Deliver ``event`` to every connected user."""

        delivered = self._hub.publish_to_all(serialize_event(event))
        logger.debug("Event %s broadcast to %d receivers", event.event_type, delivered)
        return delivered


def serialize_event(event: Event) -> Event:
    """Return a copy of ``event`` whose payload is JSON-serializable."""

    payload = copy.deepcopy(event.payload)
    _normalize_values(payload)
    return Event(event.event_type, payload)


def _normalize_values(data: dict[str, Any] | list[Any]) -> None:
    """Convert nested ``UUID`` and ``datetime`` values into strings in place."""

    items = data.items() if isinstance(data, dict) else enumerate(data)
    for key, value in list(items):
        if isinstance(value, datetime):
            data[key] = value.isoformat()
        elif isinstance(value, UUID):
            data[key] = str(value)
        elif isinstance(value, (dict, list)):
            _normalize_values(value)


realtime_event_publisher = RealtimeEventPublisher(notification_hub)


__all__ = [
    "RealtimeEventPublisher",
    "realtime_event_publisher",
    "serialize_event",
]
