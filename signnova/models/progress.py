"""Learning progress model definitions."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from signnova.database import Base, generate_id, utcnow


class Progress(Base):
    """Per-user learning counters; one row per user."""
    __tablename__ = "progress"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    signs_learned = Column(Integer, nullable=False, default=0)
    practice_time = Column(Integer, nullable=False, default=0)  # minutes
    streak = Column(Integer, nullable=False, default=0)
    last_active = Column(DateTime, nullable=False, default=utcnow)
    achievements = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
