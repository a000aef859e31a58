"""Per-project cache of build and deploy fingerprints.

Everything consumers need is re-exported here:

    from devspace_cache import load_generated_cache, save_generated_cache

    cache = load_generated_cache(profile_override="staging")
    image = cache.get_active().get_or_create_image("web")
    image.tag = "v2"
    save_generated_cache(cache)
"""

from devspace_cache.constants import GENERATED_CACHE_PATH
from devspace_cache.exceptions import (
    CacheDecodeError,
    CacheEncodeError,
    CacheIOError,
    GeneratedCacheError,
    ProfileNotFoundError,
)
from devspace_cache.models import (
    DeploymentCache,
    GeneratedCache,
    ImageCache,
    LastContext,
    ProfileCache,
)
from devspace_cache.settings import CacheSettings
from devspace_cache.store import (
    GeneratedCacheStore,
    default_store,
    dump_generated_cache,
    load_generated_cache,
    load_generated_cache_from_path,
    reset_generated_cache,
    save_generated_cache,
    save_generated_cache_to_path,
    set_test_cache,
)

__all__ = [
    "GENERATED_CACHE_PATH",
    "CacheDecodeError",
    "CacheEncodeError",
    "CacheIOError",
    "CacheSettings",
    "DeploymentCache",
    "GeneratedCache",
    "GeneratedCacheError",
    "GeneratedCacheStore",
    "ImageCache",
    "LastContext",
    "ProfileCache",
    "ProfileNotFoundError",
    "default_store",
    "dump_generated_cache",
    "load_generated_cache",
    "load_generated_cache_from_path",
    "reset_generated_cache",
    "save_generated_cache",
    "save_generated_cache_to_path",
    "set_test_cache",
]
