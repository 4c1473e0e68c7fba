"""SQLAlchemy model for ephemeral typing markers."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid

from anonyma.infrastructure.database import Base


class TypingIndicatorModel(Base):
    __tablename__ = "typing_indicator"
    __table_args__ = (UniqueConstraint("thread_id", "user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    thread_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )
    started_at = Column(DateTime, nullable=False, index=True)


__all__ = ["TypingIndicatorModel"]
