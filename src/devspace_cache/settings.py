"""Environment driven settings for tools working with the generated cache.

Supports environment variable overrides with the pattern DEVSPACE_<FIELD>
(e.g., DEVSPACE_PROFILE=staging).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from devspace_cache.constants import ENV_PREFIX, GENERATED_CACHE_PATH
from devspace_cache.store import GeneratedCacheStore


class CacheSettings(BaseSettings):
    """Runtime settings for the generated cache."""

    profile: str | None = Field(
        default=None,
        description="Profile override for this invocation (wins over the persisted active profile)",
    )
    cache_path: Path = Field(
        default=GENERATED_CACHE_PATH,
        description="Location of the cache file, relative to the working directory",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix=ENV_PREFIX,
    )

    @field_validator("profile")
    @classmethod
    def normalize_profile(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    def build_store(self) -> GeneratedCacheStore:
        """Return a store bound to :attr:`cache_path`."""
        return GeneratedCacheStore(self.cache_path)
