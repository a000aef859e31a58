"""Shared constants for the generated cache."""

from __future__ import annotations

from pathlib import Path
from typing import Final

# Relative to the working directory of the invoking process
GENERATED_CACHE_PATH: Final[Path] = Path(".devspace") / "generated.yaml"

ENV_PREFIX: Final[str] = "DEVSPACE_"
