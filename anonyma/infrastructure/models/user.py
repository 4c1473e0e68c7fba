"""SQLAlchemy models for users, user blocks and stored preferences."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from anonyma.infrastructure.database import Base
from anonyma.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of the system user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    is_active = Column(Boolean, nullable=False, default=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(512), nullable=True)


class UserBlockModel(Base):
    """``blocker_id`` no longer accepts messages from ``blocked_id``."""

    __tablename__ = "user_block"
    __table_args__ = (UniqueConstraint("blocker_id", "blocked_id"),)

    id = Column(Integer, primary_key=True, index=True)
    blocker_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    blocked_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


class UserPreferenceModel(Base):
    __tablename__ = "user_preference"

    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True
    )
    theme = Column(String(16), nullable=False, default="dark")
    notification_sound = Column(Boolean, nullable=False, default=True)
    browser_notifications = Column(Boolean, nullable=False, default=True)
    show_read_receipts = Column(Boolean, nullable=False, default=True)
    show_typing_indicators = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["UserModel", "UserBlockModel", "UserPreferenceModel"]
