"""Profile, skill and user search service."""

import logging
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models.profile import Profile, UserSkill
from app.models.user import User

logger = logging.getLogger("hundred_networks")

SEARCH_LIMIT = 10
PROFILE_FIELDS = ("first_name", "last_name", "bio", "avatar_url")


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped.lower()}%"


class ProfileService:
    """Handles profile edits, skills, and looking up other users."""

    def get_user(self, db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_profile(self, db: Session, user_id: str) -> Profile:
        """Get a user's profile, creating an empty one for users that predate profiles."""
        user = self.get_user(db, user_id)
        if user.profile is None:
            user.profile = Profile()
            db.commit()
            db.refresh(user)
        return user.profile

    def find_profile(self, db: Session, user_id: str) -> Profile | None:
        """Read-only lookup for viewing someone else's profile. Never creates a row."""
        self.get_user(db, user_id)
        return db.query(Profile).filter(Profile.user_id == user_id).first()

    def get_skills(self, db: Session, user_id: str) -> list[UserSkill]:
        """Get a user's skills ordered by name."""
        return (
            db.query(UserSkill)
            .filter(UserSkill.user_id == user_id)
            .order_by(func.lower(UserSkill.skill_name))
            .all()
        )

    def update_profile(self, db: Session, user_id: str, changes: dict[str, Any]) -> Profile:
        """Apply a partial update. Only known profile fields are written."""
        changes = {k: v for k, v in changes.items() if k in PROFILE_FIELDS}
        if not changes:
            raise ValidationError("No fields to update")

        profile = self.get_profile(db, user_id)
        for field, value in changes.items():
            setattr(profile, field, value if value is not None else "")
        db.commit()
        db.refresh(profile)
        return profile

    def add_skill(self, db: Session, user_id: str, skill_name: str, proficiency_level: str | None) -> UserSkill:
        """Add a skill. Raises ConflictError if the user already lists it."""
        skill = UserSkill(user_id=user_id, skill_name=skill_name.strip(), proficiency_level=proficiency_level or None)
        db.add(skill)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(f'Skill "{skill.skill_name}" already exists for this user.') from None
        db.refresh(skill)
        return skill

    def get_skill(self, db: Session, skill_id: str, user_id: str) -> UserSkill:
        """Get a skill by ID, scoped to its owner."""
        skill = db.query(UserSkill).filter(UserSkill.id == skill_id, UserSkill.user_id == user_id).first()
        if not skill:
            raise NotFoundError("Skill not found or you do not have permission to change it.")
        return skill

    def update_skill(self, db: Session, skill_id: str, user_id: str, changes: dict[str, Any]) -> UserSkill:
        if not changes:
            raise ValidationError("No fields provided for update.")

        skill = self.get_skill(db, skill_id, user_id)
        if "skill_name" in changes and changes["skill_name"] is not None:
            skill.skill_name = changes["skill_name"].strip()
        if "proficiency_level" in changes:
            skill.proficiency_level = changes["proficiency_level"] or None
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(f'Another skill named "{changes["skill_name"]}" already exists for this user.') from None
        db.refresh(skill)
        return skill

    def delete_skill(self, db: Session, skill_id: str, user_id: str) -> None:
        skill = self.get_skill(db, skill_id, user_id)
        db.delete(skill)
        db.commit()

    def search_users(self, db: Session, query: str, exclude_user_id: str) -> list[Profile]:
        """Case-insensitive name search over profiles, excluding the caller."""
        query = query.strip()
        if not query:
            return []

        pattern = _like_pattern(query)
        full_name = func.lower(Profile.first_name + " " + Profile.last_name)
        return (
            db.query(Profile)
            .filter(
                or_(
                    func.lower(Profile.first_name).like(pattern, escape="\\"),
                    func.lower(Profile.last_name).like(pattern, escape="\\"),
                    full_name.like(pattern, escape="\\"),
                ),
                Profile.user_id != exclude_user_id,
            )
            .order_by(Profile.last_name, Profile.first_name)
            .limit(SEARCH_LIMIT)
            .all()
        )


_profile_service: ProfileService | None = None


def get_profile_service() -> ProfileService:
    """Get singleton profile service instance."""
    global _profile_service
    if _profile_service is None:
        _profile_service = ProfileService()
    return _profile_service
