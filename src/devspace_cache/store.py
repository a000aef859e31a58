"""Loading and saving of the generated cache.

Two layers:

- path level functions (:func:`load_generated_cache_from_path`,
  :func:`save_generated_cache_to_path`) that never keep state
- :class:`GeneratedCacheStore`, a handle that loads once and hands out the same
  :class:`GeneratedCache` until it is reset

Build and deploy steps share the module level default store through
:func:`load_generated_cache` and :func:`save_generated_cache`. Tests and tools
that need isolation create their own store.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from devspace_cache.constants import GENERATED_CACHE_PATH
from devspace_cache.exceptions import CacheDecodeError, CacheEncodeError, CacheIOError
from devspace_cache.models import GeneratedCache

logger = logging.getLogger(__name__)

_NULL_TAG = "tag:yaml.org,2002:null"
_MERGE_TAG = "tag:yaml.org,2002:merge"


class _TextScalarLoader(yaml.SafeLoader):
    """SafeLoader that keeps plain scalars as written; only null is resolved."""


_TextScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag in (_NULL_TAG, _MERGE_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_generated_cache(raw: str, *, source: Path) -> GeneratedCache:
    """Parse YAML text into a :class:`GeneratedCache`.

    Plain scalars stay the text written in the file (``1.10``, ``yes``), so
    versions and hashes are never reinterpreted as numbers or booleans.

    Raises:
        CacheDecodeError: If the text is not valid YAML, the document is not a
            mapping, or its structure does not match the cache schema.

    """
    try:
        data = yaml.load(raw, Loader=_TextScalarLoader)  # noqa: S506
    except yaml.YAMLError as e:
        logger.error("Failed to parse %s: %s", source, e)
        raise CacheDecodeError(source, str(e)) from e

    if data is None:
        return GeneratedCache()

    if not isinstance(data, dict):
        msg = f"document root must be a mapping, got {type(data).__name__}"
        logger.error("Failed to parse %s: %s", source, msg)
        raise CacheDecodeError(source, msg)

    try:
        return GeneratedCache.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(location_part) for location_part in error["loc"])
            logger.error("  %s: %s", loc, error["msg"])
        raise CacheDecodeError(source, f"{e.error_count()} validation error(s)") from e


def load_generated_cache_from_path(
    path: Path,
    *,
    profile_override: str | None = None,
) -> GeneratedCache:
    """Load the generated cache stored at ``path``.

    A missing file is a first run and yields an empty cache. The override
    profile is always taken from ``profile_override``; a value persisted in
    the file is discarded.

    Args:
        path: Location of the YAML file
        profile_override: Profile selected for this invocation, if any

    Returns:
        Cache with the profile in effect initialized

    Raises:
        CacheDecodeError: If the file exists but is not a valid cache
        CacheIOError: If the file exists but cannot be read

    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No generated cache at %s, starting empty", path)
        cache = GeneratedCache()
    except OSError as e:
        logger.exception("Failed to read generated cache from %s", path)
        raise CacheIOError(path, e) from e
    else:
        logger.info("Loading generated cache from %s", path)
        cache = parse_generated_cache(raw, source=path)

    cache.override_profile = profile_override or None
    cache.get_active()
    return cache


def dump_generated_cache(cache: GeneratedCache) -> str:
    """Serialize ``cache`` to YAML text.

    Raises:
        CacheEncodeError: If the cache holds values that cannot be serialized.

    """
    try:
        data: dict[str, Any] = cache.model_dump(mode="json", by_alias=True)
        return yaml.safe_dump(
            data,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    except (PydanticSerializationError, yaml.YAMLError) as e:
        raise CacheEncodeError(str(e)) from e


def save_generated_cache_to_path(cache: GeneratedCache, path: Path) -> Path:
    """Write ``cache`` to ``path``, replacing any previous content.

    Missing parent directories are created.

    Returns:
        The path that was written

    Raises:
        CacheEncodeError: If serialization fails
        CacheIOError: If the directory or the file cannot be written

    """
    path = Path(path)
    cache.ensure_profile(cache.active_profile)
    text = dump_generated_cache(cache)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.exception("Failed to write generated cache to %s", path)
        raise CacheIOError(path, e) from e

    logger.debug("Saved generated cache to %s", path)
    return path


class GeneratedCacheStore:
    """Handle owning one lazily loaded :class:`GeneratedCache`.

    The first :meth:`open` reads the file; later calls return the same object.
    A failed load leaves the store empty, so the next :meth:`open` retries.
    Only the first load is synchronized: the cache object itself is not
    thread safe and callers must serialize concurrent mutations.
    """

    def __init__(self, path: Path = GENERATED_CACHE_PATH) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._cache: GeneratedCache | None = None
        self._writes_enabled = True

    @property
    def is_loaded(self) -> bool:
        return self._cache is not None

    @property
    def writes_enabled(self) -> bool:
        return self._writes_enabled

    def open(self, profile_override: str | None = None) -> GeneratedCache:
        """Return the cache, loading it from disk on first use.

        ``profile_override`` only takes effect on the call that performs the load.
        """
        with self._lock:
            if self._cache is None:
                self._cache = load_generated_cache_from_path(
                    self.path,
                    profile_override=profile_override,
                )
            return self._cache

    def install_test_cache(self, cache: GeneratedCache) -> None:
        """Serve ``cache`` from this store and turn :meth:`save` into a no-op."""
        with self._lock:
            self._cache = cache
            self._writes_enabled = False

    def reset(self) -> None:
        """Forget the loaded cache so the next :meth:`open` reads the disk again."""
        with self._lock:
            self._cache = None

    def resolve_path(self) -> Path:
        """Return the store path, anchoring relative paths at the current directory."""
        return Path.cwd() / self.path

    def save(self, cache: GeneratedCache | None = None) -> Path | None:
        """Persist ``cache`` (default: the loaded one) to the store path.

        Returns ``None`` without touching the disk when a test cache is installed.
        """
        if not self._writes_enabled:
            logger.debug("Skipping generated cache save, writes are disabled")
            return None

        if cache is None:
            cache = self._cache
        if cache is None:
            msg = "No generated cache loaded; call open() before save()"
            raise RuntimeError(msg)

        return save_generated_cache_to_path(cache, self.resolve_path())


_default_store = GeneratedCacheStore()


def default_store() -> GeneratedCacheStore:
    """Return the process wide store for ``.devspace/generated.yaml``."""
    return _default_store


def load_generated_cache(profile_override: str | None = None) -> GeneratedCache:
    """Load (once per process) the cache of the current project."""
    return _default_store.open(profile_override)


def save_generated_cache(cache: GeneratedCache) -> Path | None:
    """Persist ``cache`` to the current project's cache file."""
    return _default_store.save(cache)


def set_test_cache(cache: GeneratedCache) -> None:
    """Install ``cache`` as the process wide cache and disable writes."""
    _default_store.install_test_cache(cache)


def reset_generated_cache() -> None:
    """Drop the process wide cache so the next load reads the disk again."""
    _default_store.reset()


__all__ = [
    "GeneratedCacheStore",
    "default_store",
    "dump_generated_cache",
    "load_generated_cache",
    "load_generated_cache_from_path",
    "parse_generated_cache",
    "reset_generated_cache",
    "save_generated_cache",
    "save_generated_cache_to_path",
    "set_test_cache",
]
