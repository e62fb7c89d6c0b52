"""Revoked session token model."""

from sqlalchemy import Column, DateTime, String

from app.database import Base, utcnow


class RevokedToken(Base):
    """Denylist entry for a session token revoked before its natural expiry."""

    __tablename__ = "revoked_token"

    jti = Column(String(64), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    revoked_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
