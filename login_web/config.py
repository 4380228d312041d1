"""
Configuration for the login service.

Settings are read from environment variables once at startup and passed
explicitly to the components that need them.
"""
import os
from typing import List

from pydantic import BaseModel, Field, field_validator

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./users.db"


class ConfigError(RuntimeError):
    """Raised when a required setting is missing or invalid."""


class Settings(BaseModel):
    """Runtime settings for the login service."""
    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret_key: str = Field(..., min_length=1)
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(30, gt=0)
    bcrypt_rounds: int = Field(12, ge=4, le=31)
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @field_validator("log_level")
    @classmethod
    def log_level_upper(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the process environment.

        Raises:
            ConfigError: If JWT_SECRET_KEY is unset or a value fails validation
        """
        secret = os.getenv("JWT_SECRET_KEY")
        if not secret:
            raise ConfigError(
                "Missing required environment variable 'JWT_SECRET_KEY'"
            )

        origins = os.getenv("CORS_ORIGINS", "*")
        try:
            return cls(
                database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
                jwt_secret_key=secret,
                jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
                access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 30)),
                bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", 12)),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
                cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            )
        except ValueError as e:
            # pydantic.ValidationError is a ValueError subclass
            raise ConfigError(f"Invalid configuration: {e}") from e
