"""Pydantic schemas for authentication endpoints."""

from pydantic import EmailStr, Field

from app.schemas.base import CamelModel


class SignupRequest(CamelModel):
    email: EmailStr
    password: str


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(CamelModel):
    message: str
    token: str
    user_id: str
    email: str


class CurrentUserResponse(CamelModel):
    user_id: str
    email: str


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: str
    new_password: str


class MessageResponse(CamelModel):
    message: str
