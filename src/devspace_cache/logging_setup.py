"""Rich console logging for the devspace-cache command line."""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

from devspace_cache.constants import ENV_PREFIX

__all__ = ["console", "configure_logging", "find_cache_handler"]

LOG_LEVEL_ENV: Final[str] = f"{ENV_PREFIX}LOG_LEVEL"
HANDLER_NAME: Final[str] = "devspace-cache"

console = Console()


def _level_from_name(level_name: str | None) -> int:
    name = (level_name or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def find_cache_handler(logger: logging.Logger) -> RichHandler | None:
    """Return the handler installed by :func:`configure_logging`, if any."""
    for handler in logger.handlers:
        if isinstance(handler, RichHandler) and handler.get_name() == HANDLER_NAME:
            return handler
    return None


def configure_logging(level_name: str | None = None) -> None:
    """Route log records to the shared Rich console.

    ``level_name`` falls back to ``DEVSPACE_LOG_LEVEL`` and then ``INFO``;
    unknown names also mean ``INFO``. Repeated calls reuse the installed
    handler and only change the level.
    """
    root_logger = logging.getLogger()

    if find_cache_handler(root_logger) is None:
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False, markup=False)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)

    root_logger.setLevel(_level_from_name(level_name))
