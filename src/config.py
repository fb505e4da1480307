"""
Application Configuration

Uses pydantic-settings for environment variable loading with validation.
All configuration is centralized here for easy management.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOVBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Runtime environment"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level"
    )

    # ==========================================================================
    # Server
    # ==========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )

    port: int = Field(
        default=8000,
        description="API server port"
    )

    # ==========================================================================
    # Dashboards
    # ==========================================================================
    dashboard_factories: str = Field(
        default="",
        description=(
            "Comma-separated 'module:callable' factories returning a mapping of "
            "channel name to Dashboard"
        )
    )

    admin_user_ids: str = Field(
        default="",
        description="Comma-separated platform user ids allowed through AdminPermission"
    )

    @computed_field
    @property
    def dashboard_factories_list(self) -> list[str]:
        """Parse dashboard factories into a list."""
        return _split_csv(self.dashboard_factories)

    @computed_field
    @property
    def admin_user_ids_list(self) -> list[str]:
        """Parse admin user ids into a list."""
        return _split_csv(self.admin_user_ids)

    @computed_field
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @computed_field
    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == "testing"

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
