"""Profile and skill API endpoints."""

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user, require_auth
from app.schemas.profile import (
    ProfileDetailResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    SkillCreateRequest,
    SkillResponse,
    SkillUpdateRequest,
)
from app.services.profile import get_profile_service

router = APIRouter(prefix="/api/v1/profile", tags=["Profile"], dependencies=require_auth)


@router.get("", response_model=ProfileDetailResponse)
def get_own_profile(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileDetailResponse:
    """Get the current user's profile and skills."""
    service = get_profile_service()
    profile = service.get_profile(db, user.user_id)
    skills = service.get_skills(db, user.user_id)
    return ProfileDetailResponse(
        user_id=user.user_id,
        email=profile.user.email,
        profile=ProfileResponse.model_validate(profile),
        skills=[SkillResponse.model_validate(s) for s in skills],
    )


@router.put("", response_model=ProfileUpdateResponse)
def update_own_profile(
    body: ProfileUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileUpdateResponse:
    """Update any subset of the current user's profile fields."""
    profile = get_profile_service().update_profile(db, user.user_id, body.model_dump(exclude_unset=True))
    return ProfileUpdateResponse(message="Profile updated successfully", profile=ProfileResponse.model_validate(profile))


@router.post("/skills", response_model=SkillResponse, status_code=status.HTTP_201_CREATED)
def add_skill(
    body: SkillCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SkillResponse:
    """Add a skill to the current user's profile."""
    skill = get_profile_service().add_skill(db, user.user_id, body.skill_name, body.proficiency_level)
    return SkillResponse.model_validate(skill)


@router.put("/skills/{skill_id}", response_model=SkillResponse)
def update_skill(
    skill_id: uuid.UUID,
    body: SkillUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SkillResponse:
    """Rename a skill or change its proficiency level."""
    skill = get_profile_service().update_skill(
        db, str(skill_id), user.user_id, body.model_dump(exclude_unset=True)
    )
    return SkillResponse.model_validate(skill)


@router.delete("/skills/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_skill(
    skill_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    """Remove a skill from the current user's profile."""
    get_profile_service().delete_skill(db, str(skill_id), user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
