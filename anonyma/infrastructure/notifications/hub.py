"""In-process fan-out of live events to per-user channels.

Every user may hold any number of live connections; each one subscribes a
:class:`Receiver` to the user's :class:`BroadcastChannel`. Receivers buffer a
bounded number of events and drop the oldest one when a slow consumer falls
behind, so publishers never block and never fail.

A single :class:`threading.Lock` guards the registry and every channel. The
synchronous request handlers that publish run in worker threads while the
receivers are awaited on the event loop, so waiting receivers are woken with
``loop.call_soon_threadsafe``.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections import deque
from typing import Callable

from anonyma.config import get_settings
from anonyma.domain.entities import Event

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_CAPACITY = 32


class ReceiverLagged(Exception):
    """The receiver overflowed and ``skipped`` events were discarded."""

    def __init__(self, skipped: int) -> None:
        super().__init__(f"Receiver lagged behind by {skipped} events")
        self.skipped = skipped


class ReceiverClosed(Exception):
    """The receiver was closed and will never yield another event."""


def _wake(waiter: asyncio.Future) -> None:
    if not waiter.done():
        waiter.set_result(None)


class Receiver:
    """One live subscription to a user's channel."""

    def __init__(self, channel: "BroadcastChannel", capacity: int) -> None:
        self._channel = channel
        self._lock = channel.lock
        self._buffer: deque[Event] = deque()
        self._capacity = capacity
        self._lagged = 0
        self._closed = False
        self._waiter: asyncio.Future | None = None

    @property
    def user_id(self) -> int:
        return self._channel.user_id

    @property
    def closed(self) -> bool:
        return self._closed

    def try_recv(self) -> Event | None:
        """Return the next buffered event without waiting, or ``None``."""

        with self._lock:
            return self._take()

    async def recv(self) -> Event:
        """Wait for the next event published after this receiver subscribed.

        Raises :class:`ReceiverLagged` once after events were dropped and
        :class:`ReceiverClosed` when the receiver has been closed.
        """

        loop = asyncio.get_running_loop()
        while True:
            with self._lock:
                event = self._take()
                if event is not None:
                    return event
                waiter = loop.create_future()
                self._waiter = waiter
            try:
                await waiter
            finally:
                with self._lock:
                    if self._waiter is waiter:
                        self._waiter = None

    def close(self) -> None:
        """Detach this receiver; the channel and its other receivers remain."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._buffer.clear()
            self._channel.detach(self)
            self._notify()

    def deliver(self, event: Event) -> bool:
        """Buffer ``event``; the caller must hold the hub lock."""

        if self._closed:
            return False
        if len(self._buffer) >= self._capacity:
            self._buffer.popleft()
            self._lagged += 1
        self._buffer.append(event)
        self._notify()
        return True

    def _take(self) -> Event | None:
        if self._lagged:
            skipped, self._lagged = self._lagged, 0
            raise ReceiverLagged(skipped)
        if self._buffer:
            return self._buffer.popleft()
        if self._closed:
            raise ReceiverClosed()
        return None

    def _notify(self) -> None:
        waiter = self._waiter
        if waiter is None or waiter.done():
            return
        try:
            waiter.get_loop().call_soon_threadsafe(_wake, waiter)
        except RuntimeError:
            # The loop that was waiting is already closed.
            self._waiter = None


class BroadcastChannel:
    """Fan-out point for the live connections of a single user."""

    def __init__(
        self, user_id: int, *, capacity: int, lock: threading.Lock, now: float
    ) -> None:
        self.user_id = user_id
        self.capacity = capacity
        self.lock = lock
        self.last_activity = now
        self._receivers: list[Receiver] = []

    @property
    def receiver_count(self) -> int:
        return len(self._receivers)

    def receivers(self) -> list[Receiver]:
        return list(self._receivers)

    def attach(self, now: float) -> Receiver:
        receiver = Receiver(self, self.capacity)
        self._receivers.append(receiver)
        self.last_activity = now
        return receiver

    def detach(self, receiver: Receiver) -> None:
        try:
            self._receivers.remove(receiver)
        except ValueError:
            return

    def send(self, event: Event, now: float) -> int:
        self.last_activity = now
        return sum(1 for receiver in self._receivers if receiver.deliver(event))


class NotificationHub:
    """Registry of per-user channels shared by every request handler."""

    def __init__(
        self,
        capacity: int = DEFAULT_CHANNEL_CAPACITY,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity <= 0:
            raise ValueError("Channel capacity must be positive")
        self._capacity = capacity
        self._clock = clock
        self._lock = threading.Lock()
        self._channels: dict[int, BroadcastChannel] = {}

    def subscribe(self, user_id: int) -> Receiver:
        """Open a receiver that sees events published from now on."""

        with self._lock:
            now = self._clock()
            channel = self._channels.get(user_id)
            if channel is None:
                channel = BroadcastChannel(
                    user_id, capacity=self._capacity, lock=self._lock, now=now
                )
                self._channels[user_id] = channel
            return channel.attach(now)

    def publish_to(self, user_id: int, event: Event) -> int:
        """Send ``event`` to every receiver of ``user_id``; return how many got it."""

        with self._lock:
            channel = self._channels.get(user_id)
            if channel is None:
                return 0
            return channel.send(event, self._clock())

    def publish_to_all(self, event: Event) -> int:
        with self._lock:
            now = self._clock()
            return sum(channel.send(event, now) for channel in self._channels.values())

    def prune_idle(self, max_idle: float) -> int:
        """Drop channels without receivers that saw no activity for ``max_idle`` seconds."""

        with self._lock:
            now = self._clock()
            stale = [
                user_id
                for user_id, channel in self._channels.items()
                if channel.receiver_count == 0 and now - channel.last_activity >= max_idle
            ]
            for user_id in stale:
                del self._channels[user_id]
        if stale:
            logger.debug("Pruned %d idle notification channels", len(stale))
        return len(stale)

    def has_channel(self, user_id: int) -> bool:
        with self._lock:
            return user_id in self._channels

    def receiver_count(self, user_id: int) -> int:
        with self._lock:
            channel = self._channels.get(user_id)
            return channel.receiver_count if channel else 0

    def reset(self) -> None:
        """Forget every channel; open receivers are closed first."""

        with self._lock:
            channels = list(self._channels.values())
            self._channels.clear()
        for channel in channels:
            for receiver in channel.receivers():
                receiver.close()


notification_hub = NotificationHub(get_settings().notification_channel_capacity)


__all__ = [
    "DEFAULT_CHANNEL_CAPACITY",
    "BroadcastChannel",
    "NotificationHub",
    "Receiver",
    "ReceiverClosed",
    "ReceiverLagged",
    "notification_hub",
]
