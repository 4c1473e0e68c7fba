"""SQLAlchemy model for emoji reactions on messages and comments."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from anonyma.infrastructure.database import Base
from anonyma.utils import now_in_app_naive_datetime


class ReactionModel(Base):
    """One emoji per (subject, user); re-reacting overwrites the row."""

    __tablename__ = "reaction"
    __table_args__ = (UniqueConstraint("subject_type", "subject_id", "user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    subject_type = Column(String(16), nullable=False)
    subject_id = Column(Integer, nullable=False, index=True)
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    emoji = Column(String(32), nullable=False)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)


__all__ = ["ReactionModel"]
