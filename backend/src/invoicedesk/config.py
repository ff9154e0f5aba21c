"""
Application configuration loaded from environment variables.

All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, PostgresDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with validation.
    
    All settings are loaded from environment variables with the same name.
    Use .env file for local development.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    
    # Database
    database_url: PostgresDsn = Field(
        description="PostgreSQL connection string with asyncpg driver"
    )
    
    # Navigation
    login_redirect_path: str = Field(
        default="/dashboard",
        pattern=r"^/",
        description="Where a successful sign-in lands when no redirectTo is given",
    )
    
    # Listing cache
    listing_cache_ttl_seconds: int = Field(
        default=300,
        ge=0,
        description="Seconds a rendered listing stays fresh (0 = until revalidated)",
    )
    
    # Server
    debug: bool = Field(
        default=False,
        description="Enable debug mode with detailed error messages"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.
    
    Settings are loaded once at startup and cached for subsequent calls.
    This ensures consistent configuration across the application lifecycle.
    """
    return Settings()
