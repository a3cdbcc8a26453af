"""
Configuration module for the Appwrite API gateway.

This module uses Pydantic Settings to load and validate environment variables
for the backend (Appwrite) connection, the document collections the gateway
exposes, CORS and logging.

Environment variables are loaded from .env file or system environment.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Only APPWRITE_API_KEY is expected to come from the deployment
    environment; everything else has working defaults.
    """

    # =========================================================================
    # Server Configuration
    # =========================================================================

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server",
    )

    PORT: int = Field(
        default=3001,
        description="Port to bind the API server",
        ge=1,
        le=65535,
    )

    # =========================================================================
    # Appwrite Configuration
    # =========================================================================

    APPWRITE_ENDPOINT: str = Field(
        default="https://cloud.appwrite.io/v1",
        description="Appwrite API endpoint",
        min_length=1,
    )

    APPWRITE_PROJECT_ID: str = Field(
        default="692ef75c002bbb970dbe",
        description="Appwrite project ID",
        min_length=1,
    )

    APPWRITE_API_KEY: Optional[str] = Field(
        None,
        description="Appwrite server API key (used by routes without a user session)",
    )

    DATABASE_ID: str = Field(
        default="igreja_musicas",
        description="Appwrite database holding the song collections",
    )

    COLLECTION_MUSICAS: str = Field(default="musicas")
    COLLECTION_PLAYLISTS: str = Field(default="playlists")
    COLLECTION_PLAYLIST_MUSICAS: str = Field(default="playlist_musicas")

    # =========================================================================
    # Password Recovery
    # =========================================================================

    RECOVERY_REDIRECT_URL: str = Field(
        default="http://localhost:3000/reset-password",
        description="Redirect URL for recovery emails when the client sends none",
    )

    # =========================================================================
    # CORS / Logging
    # =========================================================================

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins ('*' for any)",
    )

    LOG_LEVEL: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def api_key_configured(self) -> bool:
        return bool(self.APPWRITE_API_KEY)

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse and return ALLOWED_ORIGINS as a list.

        Returns:
            List of allowed origins, ["*"] when every origin is permitted.
        """
        origins = [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]
        return origins or ["*"]

    @property
    def appwrite_endpoint_str(self) -> str:
        """Appwrite endpoint without trailing slash."""
        return self.APPWRITE_ENDPOINT.rstrip("/")

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate LOG_LEVEL is a standard logging level name.

        Raises:
            ValueError: If the level is unknown
        """
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    The settings are loaded only once during the application lifecycle and
    are read-only afterwards.

    Example:
        >>> from app.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.APPWRITE_PROJECT_ID)
    """
    return Settings()


# =============================================================================
# Configuration Helpers
# =============================================================================

def validate_configuration(settings: Settings) -> dict:
    """
    Validate critical configuration settings and return a status report.

    Called during application startup; errors and warnings are logged but
    never stop the service.

    Returns:
        Dictionary with validation status and any warnings.
    """
    errors = []
    warnings = []

    if not settings.appwrite_endpoint_str.startswith(("http://", "https://")):
        errors.append(
            f"APPWRITE_ENDPOINT must be an http(s) URL, got: {settings.APPWRITE_ENDPOINT}"
        )

    if not settings.api_key_configured:
        warnings.append("APPWRITE_API_KEY is not set")

    if "localhost" in settings.RECOVERY_REDIRECT_URL or "127.0.0.1" in settings.RECOVERY_REDIRECT_URL:
        warnings.append(
            "RECOVERY_REDIRECT_URL points to a local development address"
        )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }
