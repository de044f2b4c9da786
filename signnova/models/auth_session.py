"""Login session model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, String
from signnova.database import Base, generate_id, utcnow


class AuthSession(Base):
    """A time-bounded login session; bearer tokens point at one of these."""
    __tablename__ = "auth_sessions"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
