"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from catalog.configs.base import BaseSettings
from catalog.configs.database import DatabaseSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    api_prefix: str = Field(default="/api/v1", description="Prefix for versioned routes")

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from catalog.configs import get_settings
        settings = get_settings()
    """
    return Settings()
