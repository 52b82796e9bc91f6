"""Configuration settings for Authkeeper."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

_SECRET_VARS = ("JWT_SECRET_ACCESS_TOKEN", "JWT_SECRET_REFRESH_TOKEN", "JWT_RESET_PASSWORD_SECRET")


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./authkeeper.db")

    # JWT - one secret per token class
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_SECRET_ACCESS_TOKEN: str = os.getenv("JWT_SECRET_ACCESS_TOKEN", secrets.token_urlsafe(32))
    JWT_SECRET_REFRESH_TOKEN: str = os.getenv("JWT_SECRET_REFRESH_TOKEN", secrets.token_urlsafe(32))
    JWT_RESET_PASSWORD_SECRET: str = os.getenv("JWT_RESET_PASSWORD_SECRET", secrets.token_urlsafe(32))
    JWT_ACCESS_EXPIRE_MINUTES: int = int(os.getenv("JWT_ACCESS_EXPIRE_MINUTES", "15"))
    JWT_REFRESH_EXPIRE_MINUTES: int = int(os.getenv("JWT_REFRESH_EXPIRE_MINUTES", "10080"))

    # Argon2 (None keeps the argon2-cffi defaults)
    ARGON2_TIME_COST: int | None = int(os.environ["ARGON2_TIME_COST"]) if os.getenv("ARGON2_TIME_COST") else None
    ARGON2_MEMORY_COST: int | None = (
        int(os.environ["ARGON2_MEMORY_COST"]) if os.getenv("ARGON2_MEMORY_COST") else None
    )
    ARGON2_PARALLELISM: int | None = (
        int(os.environ["ARGON2_PARALLELISM"]) if os.getenv("ARGON2_PARALLELISM") else None
    )

    # Password reset
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Mail (SMTP). Leave MAIL_HOST empty to log reset links instead of sending.
    MAIL_HOST: str = os.getenv("MAIL_HOST", "")
    MAIL_PORT: int = int(os.getenv("MAIL_PORT", "465"))
    MAIL_USER: str = os.getenv("MAIL_USER", "")
    MAIL_PASSWORD: str = os.getenv("MAIL_PASSWORD", "")
    MAIL_SECURE: bool = os.getenv("MAIL_SECURE", "true").lower() == "true"
    MAIL_TLS: bool = os.getenv("MAIL_TLS", "true").lower() == "true"
    MAIL_FROM_NAME: str = os.getenv("MAIL_FROM_NAME", "Authkeeper")

    # Seeding
    SEED_ADMIN_EMAIL: str = os.getenv("SEED_ADMIN_EMAIL", "")
    SEED_ADMIN_PASSWORD: str = os.getenv("SEED_ADMIN_PASSWORD", "")

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        for name in _SECRET_VARS:
            if not os.getenv(name):
                errors.append(f"{name} is not set - using auto-generated key (not persistent across restarts)")
        if len({self.JWT_SECRET_ACCESS_TOKEN, self.JWT_SECRET_REFRESH_TOKEN, self.JWT_RESET_PASSWORD_SECRET}) < 3:
            errors.append("JWT secrets should differ per token class")
        if not self.MAIL_HOST:
            errors.append("MAIL_HOST is not set - password reset links will only be logged")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
