"""Periodic housekeeping for ephemeral state."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

import anyio
from anyio import to_thread
from sqlalchemy.orm import Session

from anonyma.config import get_settings
from anonyma.infrastructure.database import SessionLocal
from anonyma.infrastructure.notifications import NotificationHub, notification_hub

from .typing_indicators import sweep_stale_markers

logger = logging.getLogger(__name__)


def run_maintenance_cycle(
    *,
    session_factory: Callable[[], Session] = SessionLocal,
    hub: NotificationHub = notification_hub,
    now: datetime | None = None,
) -> tuple[int, int]:
    """Sweep stale typing markers and prune idle channels once.

    Returns ``(markers_removed, channels_pruned)``.
    """

    session = session_factory()
    try:
        removed = sweep_stale_markers(session, now=now)
    finally:
        session.close()
    pruned = hub.prune_idle(get_settings().channel_retention_seconds)
    return removed, pruned


async def maintenance_loop(interval: float | None = None) -> None:
    """Run :func:`run_maintenance_cycle` forever until cancelled."""

    interval = interval or get_settings().maintenance_interval_seconds
    logger.info("Maintenance loop started (every %.1fs)", interval)
    while True:
        try:
            await to_thread.run_sync(run_maintenance_cycle)
        except Exception:
            logger.exception("Maintenance cycle failed")
        await anyio.sleep(interval)
