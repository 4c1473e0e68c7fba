"""Behaviour of the server-sent event adapter."""

from __future__ import annotations

import json

import anyio
import pytest

from anonyma.domain.entities import EVENT_KEEP_ALIVE, new_broadcast_event
from anonyma.infrastructure.notifications import (
    NotificationHub,
    RealtimeEventPublisher,
    stream_events,
)

pytestmark = pytest.mark.anyio


async def _wait_for_subscriber(hub: NotificationHub, user_id: int) -> None:
    with anyio.fail_after(1):
        while hub.receiver_count(user_id) == 0:
            await anyio.sleep(0)


async def _collect(stream, items: list) -> None:
    async for item in stream:
        items.append(item)


async def test_stream_emits_keep_alive_when_idle(hub: NotificationHub) -> None:
    stream = stream_events(hub, 1, keepalive_interval=0.01)

    item = await stream.__anext__()
    assert hub.receiver_count(1) == 1
    await stream.aclose()

    assert item["event"] == EVENT_KEEP_ALIVE
    assert hub.receiver_count(1) == 0


async def test_unstarted_stream_never_holds_a_receiver(hub: NotificationHub) -> None:
    stream = stream_events(hub, 1, keepalive_interval=15)

    await stream.aclose()

    assert hub.receiver_count(1) == 0
    assert not hub.has_channel(1)


async def test_stream_forwards_published_events_as_json(
    hub: NotificationHub, publisher: RealtimeEventPublisher
) -> None:
    stream = stream_events(hub, 1, keepalive_interval=5)
    received = {}

    async def _first_item() -> None:
        received["item"] = await stream.__anext__()

    async with anyio.create_task_group() as task_group:
        task_group.start_soon(_first_item)
        await _wait_for_subscriber(hub, 1)
        publisher.dispatch(1, new_broadcast_event(3))
    await stream.aclose()

    assert received["item"]["event"] == "new_broadcast"
    assert json.loads(received["item"]["data"]) == {"broadcast_id": 3}
    assert hub.receiver_count(1) == 0


async def test_stream_ends_when_receiver_lags() -> None:
    hub = NotificationHub(capacity=1)
    items: list = []

    async with anyio.create_task_group() as task_group:
        task_group.start_soon(_collect, stream_events(hub, 1, keepalive_interval=5), items)
        await _wait_for_subscriber(hub, 1)
        hub.publish_to(1, new_broadcast_event(1))
        hub.publish_to(1, new_broadcast_event(2))

    assert items == []
    assert hub.receiver_count(1) == 0


async def test_stream_ends_when_client_disconnects(hub: NotificationHub) -> None:
    async def _disconnected() -> bool:
        return True

    items = [
        item
        async for item in stream_events(
            hub, 1, keepalive_interval=5, is_disconnected=_disconnected
        )
    ]

    assert items == []
    assert hub.receiver_count(1) == 0


async def test_stream_ends_when_hub_closes_receivers(hub: NotificationHub) -> None:
    items: list = []

    async with anyio.create_task_group() as task_group:
        task_group.start_soon(_collect, stream_events(hub, 1, keepalive_interval=5), items)
        await _wait_for_subscriber(hub, 1)
        hub.reset()

    assert items == []
