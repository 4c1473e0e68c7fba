"""Reaction subjects and rows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ReactionSubjectType(str, Enum):
    MESSAGE = "message"
    COMMENT = "comment"


@dataclass(frozen=True)
class ReactionSubject:
    """Thing a user can react to: a message or a broadcast comment."""

    subject_type: ReactionSubjectType
    subject_id: int

    @classmethod
    def message(cls, message_id: int) -> "ReactionSubject":
        return cls(ReactionSubjectType.MESSAGE, message_id)

    @classmethod
    def comment(cls, comment_id: int) -> "ReactionSubject":
        return cls(ReactionSubjectType.COMMENT, comment_id)


__all__ = ["ReactionSubjectType", "ReactionSubject"]
