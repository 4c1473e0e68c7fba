"""Domain entity representing a short-lived typing marker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class TypingMarker:
    """``user_id`` started typing in ``thread_id`` at ``started_at``."""

    thread_id: UUID
    user_id: int
    started_at: datetime

    def age_seconds(self, now: datetime) -> float:
        return (now - self.started_at).total_seconds()

    def is_live(self, now: datetime, liveness_seconds: float) -> bool:
        return self.age_seconds(now) < liveness_seconds


__all__ = ["TypingMarker"]
