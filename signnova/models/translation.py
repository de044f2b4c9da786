"""Translation history model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from signnova.database import Base, generate_id, utcnow

INPUT_TYPES = ("speech", "text")


class Translation(Base):
    """Append-only record of one translation request."""
    __tablename__ = "translations"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    input_text = Column(Text, nullable=False)
    input_type = Column(String(8), nullable=False)
    language = Column(String(8), nullable=False)
    created_at = Column(DateTime, index=True, nullable=False, default=utcnow)
