"""
Application configuration module.

Provides centralized, environment-safe configuration management
with sensible defaults for local development.
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables
    or a local ``.env`` file.

    Attributes:
        APP_NAME: Application name.
        APP_VERSION: Application version.
        ENVIRONMENT: Deployment environment (development, testing, production).
        DEBUG: Debug mode flag.
        DATABASE_URL: SQLAlchemy database URL.
        SECRET_KEY: Shared secret used to verify bearer tokens.
        LOG_LEVEL: Logging level.
        LOG_FORMAT: ``json`` for production, ``console`` for development.
    """

    # Application metadata
    APP_NAME: str = Field(default="Defect Tracker API")
    APP_VERSION: str = Field(default="1.0.0")
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./defect_tracker.db")
    DB_POOL_SIZE: int = Field(default=5, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)
    DB_POOL_RECYCLE: int = Field(default=1800, ge=1)

    # Bearer token verification (tokens are issued by the auth provider)
    SECRET_KEY: str = Field(default="change-me-in-production-please-32-chars")
    ALGORITHM: str = Field(default="HS256")
    ISSUER: str = Field(default="defect-tracker-auth")
    AUDIENCE: str = Field(default="defect-tracker-api")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30, ge=1)

    # Logging configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="console")

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:5173")
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Split the comma-separated CORS origins."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.info(
            f"Settings loaded: app_name={_settings.APP_NAME}, "
            f"environment={_settings.ENVIRONMENT}, debug={_settings.DEBUG}"
        )
    return _settings


settings = get_settings()
