"""Configuration settings for 100 Networks."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./hundred_networks.db")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))

    # Passwords
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))
    PASSWORD_MIN_LENGTH: int = int(os.getenv("PASSWORD_MIN_LENGTH", "8"))
    PASSWORD_RESET_EXPIRE_MINUTES: int = int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "60"))

    # Application
    APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://localhost:8000")
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if self.JWT_SECRET_KEY == "":
            errors.append("JWT_SECRET_KEY is not set - tokens can be neither issued nor verified")
        if not 4 <= self.BCRYPT_ROUNDS <= 31:
            errors.append(f"BCRYPT_ROUNDS={self.BCRYPT_ROUNDS} is outside the range bcrypt accepts (4-31)")
        if not 15 <= self.PASSWORD_RESET_EXPIRE_MINUTES <= 60:
            errors.append("PASSWORD_RESET_EXPIRE_MINUTES should be between 15 and 60")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
