"""Realtime notification helpers for the infrastructure layer."""

from .hub import (
    BroadcastChannel,
    NotificationHub,
    Receiver,
    ReceiverClosed,
    ReceiverLagged,
    notification_hub,
)
from .publisher import (
    RealtimeEventPublisher,
    realtime_event_publisher,
    serialize_event,
)
from .stream import keep_alive, stream_events, to_sse

__all__ = [
    "BroadcastChannel",
    "NotificationHub",
    "Receiver",
    "ReceiverClosed",
    "ReceiverLagged",
    "notification_hub",
    "RealtimeEventPublisher",
    "realtime_event_publisher",
    "serialize_event",
    "keep_alive",
    "stream_events",
    "to_sse",
]
