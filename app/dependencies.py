"""Authentication dependencies for FastAPI routes."""

import logging
from dataclasses import dataclass
from datetime import datetime

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import UnauthorizedError
from app.services.auth import get_auth_service
from app.services.jwt import SessionClaim, VerifiedToken, get_jwt_service

logger = logging.getLogger("hundred_networks")


@dataclass
class CurrentUser:
    """Authenticated user context."""

    user_id: str
    email: str
    token_id: str
    token_expires_at: datetime

    @property
    def token(self) -> VerifiedToken:
        return VerifiedToken(
            claim=SessionClaim(id=self.user_id, email=self.email),
            jti=self.token_id,
            expires_at=self.token_expires_at,
        )


def extract_bearer_token(auth_header: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header, or None if the shape is wrong."""
    if not auth_header:
        return None
    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Extract and validate user from the Bearer token. Raises 401 with one generic message on any failure."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    if not token:
        logger.info("Rejected request to %s: missing or malformed Authorization header", request.url.path)
        raise UnauthorizedError()

    verified = get_jwt_service().verify_token(token)
    if not verified:
        raise UnauthorizedError()

    if get_auth_service().is_token_revoked(db, verified.jti):
        logger.info("Rejected session token: revoked")
        raise UnauthorizedError()

    return CurrentUser(
        user_id=verified.claim.id,
        email=verified.claim.email,
        token_id=verified.jti,
        token_expires_at=verified.expires_at,
    )


# Attach to a router to guard every route on it
require_auth = [Depends(get_current_user)]
