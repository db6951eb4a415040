"""
voucherdesk/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, Google endpoints, session policy)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="voucherDB",
        description="MongoDB database name"
    )

    # Google identity + workspace APIs
    GOOGLE_USERINFO_URL: str = Field(
        default="https://www.googleapis.com/oauth2/v2/userinfo",
        description="OAuth2 userinfo endpoint used to verify bearer tokens"
    )
    GOOGLE_HTTP_TIMEOUT_SECONDS: int = Field(
        default=30,
        description="Timeout for calls to Google APIs in seconds"
    )

    # Session Management
    SESSION_TIMEOUT_MINUTES: int = Field(
        default=1440,
        description="Login session lifetime in minutes"
    )
    SESSION_COOKIE_NAME: str = Field(
        default="voucher_session",
        description="Name of the session cookie"
    )

    # Document rendering
    RENDER_DIR: str = Field(
        default="/tmp/voucherdesk",
        description="Directory for temporary rendered PDFs"
    )
    LOGO_DIR: str = Field(
        default="public",
        description="Directory holding company logo images"
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
    CORS_ORIGINS: list = Field(
        default=["https://voucher-form-frontend-nu.vercel.app"],
        description="Allowed CORS origins"
    )

    @field_validator("CORS_ORIGINS")
    @classmethod
    def validate_cors_origins(cls, v, info: ValidationInfo):
        """Credentialed CORS cannot use a wildcard origin in production."""
        if info.data.get("ENVIRONMENT") == "production" and "*" in v:
            raise ValueError("CORS_ORIGINS must list explicit origins in production environment")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def session_cookie_secure(self) -> bool:
        return self.is_production


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

    if not settings.GOOGLE_USERINFO_URL:
        errors.append("GOOGLE_USERINFO_URL is required")

    if settings.SESSION_TIMEOUT_MINUTES <= 0:
        errors.append("SESSION_TIMEOUT_MINUTES must be positive")

    if settings.is_production and settings.DEBUG:
        errors.append("DEBUG must be disabled in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
