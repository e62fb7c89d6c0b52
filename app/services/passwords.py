"""Password hashing with bcrypt."""

import logging

import bcrypt

from app.config import get_settings
from app.errors import ValidationError

logger = logging.getLogger("hundred_networks")

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _too_long(encoded: bytes) -> bool:
    return len(encoded) > BCRYPT_MAX_BYTES


class PasswordHasher:
    """Salted, adaptive-cost password hashing."""

    def __init__(self, rounds: int | None = None) -> None:
        self.rounds = rounds if rounds is not None else get_settings().BCRYPT_ROUNDS

    def hash(self, plaintext: str, field: str = "password") -> str:
        """Hash a password with a fresh salt. Same input never yields the same output twice."""
        encoded = plaintext.encode("utf-8")
        if _too_long(encoded):
            raise ValidationError(
                f"Password must be at most {BCRYPT_MAX_BYTES} bytes long",
                errors=[{"field": field, "message": "Password is too long"}],
            )
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plaintext: str, hashed: str | None) -> bool:
        """Check a password against a stored hash. Malformed hashes count as a mismatch."""
        if not hashed:
            return False
        encoded = plaintext.encode("utf-8")
        if _too_long(encoded):
            # nothing longer was ever hashed
            logger.info("Password verification rejected: input exceeds %d bytes", BCRYPT_MAX_BYTES)
            return False
        try:
            return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
        except ValueError:
            logger.warning("Password verification against a malformed hash")
            return False


def validate_new_password(password: str, field: str = "password") -> None:
    """Raise ValidationError unless the password fits the length limits."""
    min_length = get_settings().PASSWORD_MIN_LENGTH
    if not password or len(password) < min_length:
        message = f"Password must be at least {min_length} characters long"
        raise ValidationError(message, errors=[{"field": field, "message": message}])
    if _too_long(password.encode("utf-8")):
        message = f"Password must be at most {BCRYPT_MAX_BYTES} bytes long"
        raise ValidationError(message, errors=[{"field": field, "message": "Password is too long"}])


_password_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """Get singleton password hasher instance."""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = PasswordHasher()
    return _password_hasher
