"""JWT Token Service."""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from app.config import get_settings
from app.database import utcnow
from app.errors import ConfigurationError

logger = logging.getLogger("hundred_networks")

REQUIRED_CLAIMS = ("sub", "email", "exp", "jti")


def _is_canonical_segment(segment: str) -> bool:
    # base64url leaves spare low bits in the last character that decoders ignore
    try:
        return base64url_encode(base64url_decode(segment.encode("ascii"))).decode("ascii") == segment
    except ValueError:
        return False


@dataclass(frozen=True)
class SessionClaim:
    """Identity embedded in a session token."""

    id: str
    email: str


@dataclass(frozen=True)
class VerifiedToken:
    """A session token that passed signature and expiry checks."""

    claim: SessionClaim
    jti: str
    expires_at: datetime


class JWTService:
    """Issues and verifies signed, time-limited session tokens."""

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expire_minutes: int | None = None,
    ) -> None:
        settings = get_settings()
        self.secret_key = secret_key if secret_key is not None else settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expire_minutes = expire_minutes if expire_minutes is not None else settings.JWT_EXPIRE_MINUTES

    def issue_token(self, claim: SessionClaim) -> str:
        """Create a signed token for the given claim. Raises ConfigurationError without a secret."""
        if not self.secret_key:
            raise ConfigurationError("JWT_SECRET_KEY is not configured")

        now = utcnow()
        payload = {
            "sub": claim.id,
            "email": claim.email,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
            "jti": secrets.token_hex(16),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> VerifiedToken | None:
        """Verify signature and expiry. Returns None for any failure; the reason only goes to the log."""
        if not self.secret_key:
            logger.error("Token verification attempted without JWT_SECRET_KEY configured")
            return None

        segments = token.split(".")
        if len(segments) != 3 or not all(_is_canonical_segment(s) for s in segments):
            logger.info("Rejected session token: malformed encoding")
            return None

        try:
            payload: dict[str, Any] = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected session token: expired")
            return None
        except JWTError as e:
            logger.info("Rejected session token: %s", e)
            return None

        missing = [name for name in REQUIRED_CLAIMS if not payload.get(name)]
        if missing:
            logger.info("Rejected session token: missing claims %s", ", ".join(missing))
            return None

        return VerifiedToken(
            claim=SessionClaim(id=str(payload["sub"]), email=str(payload["email"])),
            jti=str(payload["jti"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )

    def is_token_valid(self, token: str) -> bool:
        """Check if a token is valid."""
        return self.verify_token(token) is not None


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
