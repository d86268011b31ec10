"""Core configuration settings.

Centralized configuration using Pydantic Settings for environment
variable management with sensible defaults.
"""

import logging
import os
import secrets
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Security features:
    - Debug mode validation (cannot be True in production)
    - CORS origin validation (no wildcards in production)
    - Safe defaults for all settings
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Environment Detection
    # =========================================================================

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        alias="ENVIRONMENT",
    )

    # Application
    app_name: str = "SaaS Identity Analytics"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = "sqlite:///./data/saas_analytics.db"
    database_pool_size: int = Field(default=5, alias="DB_POOL_SIZE")
    database_max_overflow: int = Field(default=10, alias="DB_MAX_OVERFLOW")
    database_pool_timeout: int = Field(default=30, alias="DB_POOL_TIMEOUT")
    slow_query_threshold_ms: float = Field(default=500.0, alias="SLOW_QUERY_THRESHOLD_MS")

    # =========================================================================
    # Authentication
    # =========================================================================

    jwt_secret_key: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = Field(default=30, alias="JWT_ACCESS_TOKEN_EXPIRE_MINUTES")
    jwt_issuer: str = "saas-analytics-platform"
    jwt_audience: str = "saas-analytics-api"

    # CORS (RESTRICTED in production - no wildcards allowed)
    cors_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["http://localhost:3000"])

    # =========================================================================
    # Identity Analytics Policy
    # =========================================================================

    # Accounts younger than this are not yet expected to have logged in
    ghost_grace_period_days: int = Field(default=14, ge=0, alias="GHOST_GRACE_PERIOD_DAYS")
    inactivity_threshold_days: int = Field(default=90, ge=1, alias="INACTIVITY_THRESHOLD_DAYS")
    max_dashboard_recommendations: int = Field(default=5, ge=1, le=5, alias="MAX_DASHBOARD_RECOMMENDATIONS")

    # Platform record fetches
    # Comma-separated in the environment, e.g. ENABLED_PLATFORMS=github,slack
    enabled_platforms: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "google-workspace",
            "github",
            "slack",
            "zoom",
            "aws",
            "azure",
            "office365",
        ],
        alias="ENABLED_PLATFORMS",
    )
    fetch_timeout_seconds: float = Field(default=30.0, gt=0, alias="FETCH_TIMEOUT_SECONDS")
    fetch_max_retries: int = Field(default=2, ge=0, alias="FETCH_MAX_RETRIES")
    fetch_backoff_factor: float = Field(default=0.5, ge=0, alias="FETCH_BACKOFF_FACTOR")

    # Default monthly seat cost (USD) when no synced billing record exists
    seat_cost_google_workspace: float = Field(default=12.0, ge=0)  # Business Standard
    seat_cost_github: float = Field(default=4.0, ge=0)  # Team
    seat_cost_slack: float = Field(default=8.0, ge=0)  # Pro
    seat_cost_zoom: float = Field(default=15.0, ge=0)  # Pro
    seat_cost_aws: float = Field(default=0.0, ge=0)
    seat_cost_azure: float = Field(default=0.0, ge=0)
    seat_cost_office365: float = Field(default=12.5, ge=0)  # Business Standard

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("environment", mode="before")
    @classmethod
    def detect_environment(cls, v: str | None) -> str:
        """Auto-detect environment from common environment variables."""
        if v:
            return v.lower()

        if os.getenv("PRODUCTION") or os.getenv("PROD"):
            return "production"
        if os.getenv("STAGING"):
            return "staging"

        return "development"

    @model_validator(mode="after")
    def validate_debug_mode(self):
        """CRITICAL: Prevent debug mode in production."""
        if self.is_production and self.debug:
            logger.error(
                "CRITICAL SECURITY ERROR: DEBUG mode cannot be enabled in production! "
                "Set DEBUG=false or ENVIRONMENT=development"
            )
            raise ValueError("DEBUG cannot be True in production environment")

        return self

    @model_validator(mode="after")
    def validate_cors_origins(self):
        """CRITICAL: Prevent wildcard CORS in production."""
        if self.is_production:
            for origin in self.cors_origins:
                if origin.strip() == "*":
                    logger.error(
                        "CRITICAL SECURITY ERROR: Wildcard (*) CORS origin not allowed in production! "
                        "Set explicit origins in CORS_ORIGINS"
                    )
                    raise ValueError("Wildcard CORS origin (*) not allowed in production")

        return self

    @field_validator("cors_origins", "enabled_platforms", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Parse list settings from a comma-separated string or list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Validate JWT secret key is not default/weak."""
        if len(v) < 32:
            logger.warning(
                "JWT secret key is too short (< 32 characters). "
                "Generate a strong key with: python -c \"import secrets; print(secrets.token_urlsafe(32))\""
            )
        return v

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    def get_default_seat_cost(self, platform: str) -> float:
        """Get the configured default monthly seat cost for a platform."""
        attr = "seat_cost_" + platform.replace("-", "_")
        return float(getattr(self, attr, 0.0))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
