"""Sign dictionary model definitions."""

from sqlalchemy import JSON, Column, DateTime, String, Text
from signnova.database import Base, generate_id, utcnow

SIGN_LANGUAGES = ("ASL", "BSL", "ISL", "LSF", "GSL")
DIFFICULTIES = ("beginner", "intermediate", "advanced")


class Sign(Base):
    """A dictionary entry mapping a word to a demonstration video."""
    __tablename__ = "signs"

    id = Column(String(32), primary_key=True, default=generate_id)
    word = Column(String, index=True, nullable=False)
    language = Column(String(8), index=True, nullable=False)
    category = Column(String, index=True, nullable=False)
    difficulty = Column(String(16), nullable=False)
    video_url = Column(String, nullable=False)
    thumbnail = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    related_signs = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, index=True, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
