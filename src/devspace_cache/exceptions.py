"""Exceptions raised while loading or saving the generated cache."""

from __future__ import annotations

from pathlib import Path


class GeneratedCacheError(Exception):
    """Base exception for all generated cache errors."""


class CacheDecodeError(GeneratedCacheError):
    """Raised when the cache file exists but cannot be parsed into a cache."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid generated cache at '{path}': {reason}")


class ProfileNotFoundError(GeneratedCacheError):
    """Raised when a named profile has no entry in the cache."""

    def __init__(self, profile_name: str, available_profiles: list[str]) -> None:
        self.profile_name = profile_name
        self.available_profiles = available_profiles
        available = ", ".join(available_profiles) or "none"
        super().__init__(f"Profile '{profile_name}' not found. Available profiles: {available}")


class CacheEncodeError(GeneratedCacheError):
    """Raised when the in-memory cache cannot be serialized to YAML."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to serialize generated cache: {reason}")


class CacheIOError(GeneratedCacheError):
    """Raised when reading or writing the cache file fails."""

    def __init__(self, path: Path, original_exception: OSError) -> None:
        self.path = path
        self.original_exception = original_exception
        super().__init__(f"Cannot access generated cache at '{path}': {original_exception}")
