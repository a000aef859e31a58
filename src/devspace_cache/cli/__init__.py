"""Command line interface for devspace-cache."""

from devspace_cache.cli.main import app

__all__ = ["app"]
