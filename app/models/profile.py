"""Profile and skill models."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base, utcnow


class Profile(Base):
    """Public-facing profile, one per user, created empty at signup."""

    __tablename__ = "profile"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True, index=True)
    first_name = Column(String(128), nullable=False, default="")
    last_name = Column(String(128), nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    avatar_url = Column(String(1024), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="profile")


class UserSkill(Base):
    """A named skill on a user's profile."""

    __tablename__ = "user_skill"
    __table_args__ = (UniqueConstraint("user_id", "skill_name", name="uq_user_skill_user_id_skill_name"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    skill_name = Column(String(128), nullable=False)
    proficiency_level = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("User", back_populates="skills")
