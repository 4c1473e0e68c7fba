"""SQLAlchemy models backing the thread store."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)

from anonyma.domain.entities import MessageState
from anonyma.infrastructure.database import Base
from anonyma.utils import now_in_app_naive_datetime


class MessageModel(Base):
    """Database representation of a direct message."""

    __tablename__ = "message"

    id = Column(Integer, primary_key=True, index=True)
    thread_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    sender_id = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    recipient_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime, nullable=True)
    state = Column(String(16), nullable=False, default=MessageState.ACTIVE.value)
    edited_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    deleted_by = Column(Integer, ForeignKey("user.id"), nullable=True)


class MessageEditModel(Base):
    """Content a message had before an edit."""

    __tablename__ = "message_edit"

    id = Column(Integer, primary_key=True, index=True)
    message_id = Column(
        Integer, ForeignKey("message.id", ondelete="CASCADE"), nullable=False, index=True
    )
    old_content = Column(Text, nullable=False)
    edited_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    edited_by = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)


class PinnedMessageModel(Base):
    __tablename__ = "pinned_message"
    __table_args__ = (UniqueConstraint("message_id", "user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    message_id = Column(
        Integer, ForeignKey("message.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    pinned_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class PinnedThreadModel(Base):
    __tablename__ = "pinned_thread"
    __table_args__ = (UniqueConstraint("thread_id", "user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    thread_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    pinned_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = [
    "MessageModel",
    "MessageEditModel",
    "PinnedMessageModel",
    "PinnedThreadModel",
]
