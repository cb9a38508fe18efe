"""
Configuration and settings for the gallery service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://davinci.vercel.app"


class Settings(BaseSettings):
    """Environment-backed settings, read once at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Remote document database; an empty app id selects the local fallback
    app_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DAVINCI_APP_ID", "VITE_APP_ID")
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        validation_alias=AliasChoices("DAVINCI_API_URL", "VITE_DAVINCI_API_URL"),
    )
    request_timeout: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("DAVINCI_TIMEOUT")
    )
    collection: str = Field(
        default="images", validation_alias=AliasChoices("GALLERY_COLLECTION")
    )

    # Local fallback key-value store
    local_store_path: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("GALLERY_LOCAL_STORE_PATH")
    )
    redis_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("REDIS_URL"))

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("GALLERY_LOG_LEVEL"))

    @property
    def remote_enabled(self) -> bool:
        return bool(self.app_id)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
