# ABOUTME: Centralized configuration using Pydantic Settings.
# ABOUTME: Loads logging and output settings from OPML_DOC_* environment variables and .env.

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library and CLI settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OPML_DOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Serialization
    xml_declaration: bool = False
    json_indent: int = 2

    # Logging
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
