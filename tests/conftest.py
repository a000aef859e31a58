from __future__ import annotations

from pathlib import Path

import pytest

from devspace_cache import store as store_module
from devspace_cache.store import GeneratedCacheStore

SAMPLE_CACHE = """\
activeProfile: default
vars:
  REGISTRY: ghcr.io/acme
profiles:
  default:
    images:
      web:
        imageConfigHash: abc123
        imageName: ghcr.io/acme/web
        tag: v1
    dependencies:
      shared-db: 1.4.0
    lastContext:
      namespace: dev
      context: kind-dev
  staging:
    deployments:
      api:
        helmChartHash: chart-1
"""


@pytest.fixture(autouse=True)
def _fresh_default_store(monkeypatch):
    """Give every test its own process wide store."""
    monkeypatch.setattr(store_module, "_default_store", GeneratedCacheStore())


@pytest.fixture
def cache_file(tmp_path) -> Path:
    """Path of a cache file inside an isolated project directory."""
    return tmp_path / ".devspace" / "generated.yaml"


@pytest.fixture
def sample_cache_file(cache_file) -> Path:
    """Cache file pre-populated with two profiles."""
    cache_file.parent.mkdir(parents=True)
    cache_file.write_text(SAMPLE_CACHE, encoding="utf-8")
    return cache_file
