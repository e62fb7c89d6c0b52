"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.dependencies import CurrentUser, get_current_user, require_auth
from app.rate_limit import limiter
from app.schemas.auth import (
    CurrentUserResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    TokenResponse,
)
from app.services.auth import get_auth_service
from app.services.jwt import SessionClaim, get_jwt_service
from app.services.password_reset import ResetLinkSender, get_password_reset_service, get_reset_link_sender

logger = logging.getLogger("hundred_networks")

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])
session_router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"], dependencies=require_auth)

RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset link has been sent."


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
def signup(request: Request, body: SignupRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Register a new user account."""
    user = get_auth_service().register(db, body.email, body.password)
    token = get_jwt_service().issue_token(SessionClaim(id=user.id, email=user.email))
    return TokenResponse(message="User created successfully", token=token, user_id=user.id, email=user.email)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Authenticate and receive a JWT token."""
    user = get_auth_service().authenticate(db, body.email, body.password)
    token = get_jwt_service().issue_token(SessionClaim(id=user.id, email=user.email))
    return TokenResponse(message="Login successful", token=token, user_id=user.id, email=user.email)


@router.post("/request-password-reset", response_model=MessageResponse)
@limiter.limit("3/minute")
def request_password_reset(
    request: Request,
    body: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    sender: ResetLinkSender = Depends(get_reset_link_sender),
) -> MessageResponse:
    """Request a password reset. The response never reveals whether the email is registered."""
    token = get_password_reset_service().request_reset(db, body.email)

    if token:
        base_url = get_settings().APP_BASE_URL.rstrip("/")
        sender.send(body.email, f"{base_url}/auth/reset-password?token={token}")

    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit("5/minute")
def reset_password(request: Request, body: ResetPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    """Reset password using a valid token."""
    get_password_reset_service().complete_reset(db, body.token, body.new_password)
    return MessageResponse(
        message="Password has been reset successfully. You can now log in with your new password."
    )


@session_router.post("/logout", response_model=MessageResponse)
def logout(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)) -> MessageResponse:
    """Revoke the presented session token."""
    get_auth_service().revoke_token(db, user.token)
    return MessageResponse(message="Logout successful")


@session_router.get("/me", response_model=CurrentUserResponse)
def me(user: CurrentUser = Depends(get_current_user)) -> CurrentUserResponse:
    """Return the authenticated principal."""
    return CurrentUserResponse(user_id=user.user_id, email=user.email)
