"""Allow ``python -m devspace_cache``."""

from devspace_cache.cli import app

if __name__ == "__main__":
    app()
