"""SQLAlchemy models for broadcasts, their views and comments."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from anonyma.infrastructure.database import Base
from anonyma.utils import now_in_app_naive_datetime


class BroadcastModel(Base):
    """Database representation of a public broadcast."""

    __tablename__ = "broadcast"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    content = Column(Text, nullable=False)
    is_anonymous = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime, nullable=False, default=now_in_app_naive_datetime, index=True
    )

    sender = relationship("UserModel", lazy="joined")


class BroadcastViewModel(Base):
    __tablename__ = "broadcast_view"
    __table_args__ = (UniqueConstraint("broadcast_id", "user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    broadcast_id = Column(
        Integer, ForeignKey("broadcast.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    viewed_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class BroadcastCommentModel(Base):
    """Comment on a broadcast; ``parent_comment_id`` threads replies."""

    __tablename__ = "broadcast_comment"

    id = Column(Integer, primary_key=True, index=True)
    broadcast_id = Column(
        Integer, ForeignKey("broadcast.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)
    parent_comment_id = Column(
        Integer,
        ForeignKey("broadcast_comment.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    deleted_at = Column(DateTime, nullable=True)

    user = relationship("UserModel", lazy="joined")


__all__ = ["BroadcastModel", "BroadcastViewModel", "BroadcastCommentModel"]
