"""Authentication service."""

import logging

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import utcnow
from app.errors import ConflictError, UnauthorizedError
from app.models.profile import Profile
from app.models.revoked_token import RevokedToken
from app.models.user import User
from app.services.jwt import VerifiedToken
from app.services.passwords import PasswordHasher, get_password_hasher, validate_new_password

logger = logging.getLogger("hundred_networks")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(db: Session, email: str) -> User | None:
    """Case-insensitive lookup by email."""
    return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()


class AuthService:
    """Handles signup, login and session revocation."""

    def __init__(self, hasher: PasswordHasher | None = None) -> None:
        self.hasher = hasher or get_password_hasher()
        self._dummy_hash: str | None = None

    def register(self, db: Session, email: str, password: str) -> User:
        """Create a user with an empty profile. Raises ConflictError if the email is taken."""
        validate_new_password(password)
        if find_user_by_email(db, email):
            raise ConflictError("User already exists")

        user = User(email=normalize_email(email), password_hash=self.hasher.hash(password))
        user.profile = Profile()
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # lost a race against a concurrent signup for the same address
            db.rollback()
            raise ConflictError("User already exists") from None
        db.refresh(user)

        logger.info("User registered: %s", user.id)
        return user

    def authenticate(self, db: Session, email: str, password: str) -> User:
        """Authenticate a user by email and password. Unknown email and wrong password look the same."""
        user = find_user_by_email(db, email)
        if not user:
            # burn a comparable amount of time so unknown emails are not distinguishable
            self.hasher.verify(password, self._get_dummy_hash())
            raise UnauthorizedError("Invalid credentials")

        if not self.hasher.verify(password, user.password_hash):
            raise UnauthorizedError("Invalid credentials")

        user.last_login_at = utcnow()
        db.commit()
        return user

    def revoke_token(self, db: Session, token: VerifiedToken) -> None:
        """Denylist a session token until its natural expiry and drop entries that already lapsed."""
        now = utcnow()
        db.execute(
            delete(RevokedToken)
            .where(RevokedToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        if db.get(RevokedToken, token.jti) is None:
            db.add(RevokedToken(jti=token.jti, user_id=token.claim.id, expires_at=token.expires_at))
        db.commit()
        logger.info("Session token revoked for user %s", token.claim.id)

    def is_token_revoked(self, db: Session, jti: str) -> bool:
        return db.get(RevokedToken, jti) is not None

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.hasher.hash("not-a-real-password")
        return self._dummy_hash


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
