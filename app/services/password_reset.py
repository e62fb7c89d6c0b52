"""Password reset tickets.

A ticket lives on the user row as ``reset_token_hash`` (SHA-256 of the
plaintext token mailed to the user) and ``reset_token_expires_at``. The
plaintext is never stored or logged. Completing a reset is a single
conditional UPDATE guarded by the hash and expiry, so of two concurrent
attempts with the same token exactly one can match.
"""

import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Protocol

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import utcnow
from app.errors import InvalidOrExpiredTokenError, StoreError, ValidationError
from app.models.user import User
from app.services.auth import find_user_by_email
from app.services.passwords import PasswordHasher, get_password_hasher, validate_new_password

logger = logging.getLogger("hundred_networks")


class ResetLinkSender(Protocol):
    """Delivers a reset link to the account owner out of band."""

    def send(self, email: str, reset_url: str) -> None: ...


class LogResetLinkSender:
    """Stand-in sender that records the dispatch without the link itself."""

    def send(self, email: str, reset_url: str) -> None:
        logger.info("PASSWORD RESET link dispatched to %s", email)


def hash_reset_token(plaintext: str) -> str:
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()


class PasswordResetService:
    """Issues and consumes single-use password reset tickets."""

    def __init__(self, hasher: PasswordHasher | None = None, expire_minutes: int | None = None) -> None:
        self.hasher = hasher or get_password_hasher()
        self.expire_minutes = (
            expire_minutes if expire_minutes is not None else get_settings().PASSWORD_RESET_EXPIRE_MINUTES
        )

    def request_reset(self, db: Session, email: str) -> str | None:
        """Open a ticket for the given email.

        Returns the plaintext token if the user exists, None otherwise. A new
        request replaces any outstanding ticket. Callers must not reveal
        whether the user was found.
        """
        user = find_user_by_email(db, email)
        if not user:
            return None

        plaintext = secrets.token_hex(32)
        user.reset_token_hash = hash_reset_token(plaintext)
        user.reset_token_expires_at = utcnow() + timedelta(minutes=self.expire_minutes)
        db.commit()

        logger.info("Password reset ticket issued for user %s", user.id)
        return plaintext

    def complete_reset(self, db: Session, token: str, new_password: str) -> None:
        """Consume a ticket and rotate the password.

        Raises ValidationError for missing input or a short password (nothing
        is touched), InvalidOrExpiredTokenError when no live ticket matches.
        """
        if not token:
            raise ValidationError(
                "Token and new password are required",
                errors=[{"field": "token", "message": "Token is required"}],
            )
        validate_new_password(new_password, field="newPassword")

        new_hash = self.hasher.hash(new_password, field="newPassword")
        stmt = (
            update(User)
            .where(
                User.reset_token_hash == hash_reset_token(token),
                User.reset_token_expires_at > utcnow(),
            )
            .values(password_hash=new_hash, reset_token_hash=None, reset_token_expires_at=None)
            .execution_options(synchronize_session=False)
        )
        try:
            result = db.execute(stmt)
            if result.rowcount != 1:
                db.rollback()
                logger.info("Password reset rejected: no live ticket matched")
                raise InvalidOrExpiredTokenError()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError() from e

        logger.info("Password reset completed")


_password_reset_service: PasswordResetService | None = None
_reset_link_sender: ResetLinkSender | None = None


def get_password_reset_service() -> PasswordResetService:
    """Get singleton password reset service instance."""
    global _password_reset_service
    if _password_reset_service is None:
        _password_reset_service = PasswordResetService()
    return _password_reset_service


def get_reset_link_sender() -> ResetLinkSender:
    """Get the configured reset link sender."""
    global _reset_link_sender
    if _reset_link_sender is None:
        _reset_link_sender = LogResetLinkSender()
    return _reset_link_sender
