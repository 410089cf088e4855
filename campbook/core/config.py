"""
campbook/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, identity provider key, quotas)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="campbook",
        description="MongoDB database name"
    )

    # Identity provider (Firebase Identity Toolkit)
    FIREBASE_API_KEY: Optional[str] = Field(
        default=None,
        description="Web API key of the Firebase project"
    )
    IDENTITY_TOOLKIT_URL: str = Field(
        default="https://identitytoolkit.googleapis.com/v1",
        description="Identity Toolkit REST base URL"
    )
    IDENTITY_PROVIDER_TIMEOUT: float = Field(
        default=10.0,
        description="Identity provider request timeout in seconds"
    )

    # Bookings
    MAX_BOOKINGS_PER_USER: int = Field(
        default=3,
        description="Maximum bookings a non-admin user may hold at creation time"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @validator("FIREBASE_API_KEY")
    def validate_firebase_key(cls, v, values):
        """Ensure the identity provider key is set in production."""
        if values.get("ENVIRONMENT") == "production" and not v:
            raise ValueError("FIREBASE_API_KEY is required in production environment")
        return v

    @validator("MAX_BOOKINGS_PER_USER")
    def validate_booking_quota(cls, v):
        if v < 1:
            raise ValueError("MAX_BOOKINGS_PER_USER must be at least 1")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if not settings.IDENTITY_TOOLKIT_URL:
        errors.append("IDENTITY_TOOLKIT_URL is required")

    # Production-specific validations
    if settings.is_production and not settings.FIREBASE_API_KEY:
        errors.append("FIREBASE_API_KEY is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
