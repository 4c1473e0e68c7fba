"""Turn a hub receiver into a stream of server-sent events."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from anonyma.domain.entities import EVENT_KEEP_ALIVE, Event

from .hub import NotificationHub, ReceiverClosed, ReceiverLagged

logger = logging.getLogger(__name__)

DisconnectCheck = Callable[[], Awaitable[bool]]


def to_sse(event: Event) -> dict[str, str]:
    """Return the ``EventSourceResponse`` representation of ``event``."""

    return {"event": event.event_type, "data": json.dumps(event.payload)}


def keep_alive() -> dict[str, str]:
    return {"event": EVENT_KEEP_ALIVE, "data": "{}"}


async def stream_events(
    hub: NotificationHub,
    user_id: int,
    keepalive_interval: float,
    is_disconnected: DisconnectCheck | None = None,
) -> AsyncIterator[dict[str, str]]:
    """Yield every event published to ``user_id`` until the client goes away.

    The receiver is only opened once iteration starts, so a stream that is
    discarded before its first item never holds a slot in the hub.
    A ``keep-alive`` event is emitted whenever nothing arrived for
    ``keepalive_interval`` seconds. The stream ends quietly when the receiver
    lags behind or is closed; the receiver is always closed on exit.
    """

    receiver = hub.subscribe(user_id)
    logger.info("Live stream opened for user %s", user_id)
    try:
        while True:
            if is_disconnected is not None and await is_disconnected():
                break
            try:
                event = await asyncio.wait_for(receiver.recv(), timeout=keepalive_interval)
            except asyncio.TimeoutError:
                yield keep_alive()
                continue
            except ReceiverLagged as exc:
                logger.warning(
                    "Live stream of user %s dropped %d events; closing so the client resyncs",
                    user_id,
                    exc.skipped,
                )
                break
            except ReceiverClosed:
                break
            yield to_sse(event)
    finally:
        receiver.close()
        logger.info("Live stream closed for user %s", user_id)


__all__ = ["stream_events", "to_sse", "keep_alive"]
