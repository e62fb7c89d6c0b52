"""User lookup API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user, require_auth
from app.schemas.profile import PublicProfileResponse, SkillResponse, UserSearchResponse, UserSearchResult
from app.services.profile import get_profile_service

router = APIRouter(prefix="/api/v1/users", tags=["Users"], dependencies=require_auth)


@router.get("/search", response_model=UserSearchResponse)
def search_users(
    query: str = "",
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserSearchResponse:
    """Search other users by name."""
    profiles = get_profile_service().search_users(db, query, exclude_user_id=user.user_id)
    return UserSearchResponse(
        users=[
            UserSearchResult(
                id=p.user_id,
                first_name=p.first_name,
                last_name=p.last_name,
                avatar_url=p.avatar_url,
                full_name=f"{p.first_name} {p.last_name}".strip(),
            )
            for p in profiles
        ]
    )


@router.get("/{user_id}", response_model=PublicProfileResponse)
def get_user_profile(user_id: str, db: Session = Depends(get_db)) -> PublicProfileResponse:
    """Get another user's public profile."""
    service = get_profile_service()
    profile = service.find_profile(db, user_id)
    skills = service.get_skills(db, user_id)
    return PublicProfileResponse(
        user_id=user_id,
        first_name=profile.first_name if profile else "",
        last_name=profile.last_name if profile else "",
        bio=profile.bio if profile else "",
        avatar_url=profile.avatar_url if profile else "",
        skills=[SkillResponse.model_validate(s) for s in skills],
    )
