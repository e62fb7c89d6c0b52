"""Pydantic schemas for profile, skill and user search endpoints."""

from datetime import datetime

from pydantic import AnyHttpUrl, Field, TypeAdapter, field_validator

from app.schemas.base import CamelModel

_http_url = TypeAdapter(AnyHttpUrl)


class ProfileUpdateRequest(CamelModel):
    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    bio: str | None = Field(default=None, max_length=500)
    avatar_url: str | None = Field(default=None, max_length=1024)

    @field_validator("avatar_url")
    @classmethod
    def check_avatar_url(cls, value: str | None) -> str | None:
        # empty string clears the avatar
        if value:
            try:
                _http_url.validate_python(value)
            except ValueError:
                raise ValueError("Invalid URL format for avatar") from None
        return value


class ProfileResponse(CamelModel):
    first_name: str
    last_name: str
    bio: str
    avatar_url: str
    created_at: datetime
    updated_at: datetime


class SkillCreateRequest(CamelModel):
    skill_name: str = Field(min_length=1, max_length=128)
    proficiency_level: str | None = Field(default=None, max_length=64)


class SkillUpdateRequest(CamelModel):
    skill_name: str | None = Field(default=None, min_length=1, max_length=128)
    proficiency_level: str | None = Field(default=None, max_length=64)


class SkillResponse(CamelModel):
    id: str
    skill_name: str
    proficiency_level: str | None
    created_at: datetime


class ProfileDetailResponse(CamelModel):
    user_id: str
    email: str
    profile: ProfileResponse
    skills: list[SkillResponse]


class ProfileUpdateResponse(CamelModel):
    message: str
    profile: ProfileResponse


class PublicProfileResponse(CamelModel):
    user_id: str
    first_name: str
    last_name: str
    bio: str
    avatar_url: str
    skills: list[SkillResponse]


class UserSearchResult(CamelModel):
    id: str
    first_name: str
    last_name: str
    avatar_url: str
    full_name: str


class UserSearchResponse(CamelModel):
    users: list[UserSearchResult]
