"""Favorite model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from signnova.database import Base, generate_id, utcnow


class Favorite(Base):
    """A user's bookmark of a sign. At most one per (user, sign)."""
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "sign_id", name="uq_favorites_user_sign"),)

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    sign_id = Column(String(32), ForeignKey("signs.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    sign = relationship("Sign", lazy="joined")
