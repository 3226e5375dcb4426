"""
Application settings using Pydantic.

Provides environment-based configuration loading with TARGETEDID_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # YAML configuration file with module options and named values
    config_path: str | None = None

    # Secret salt, used when the configuration file does not set one
    salt: str | None = None

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "TARGETEDID_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
