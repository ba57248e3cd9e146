"""Utility functions for stagechain."""

import os
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """Get the stagechain data directory.

    Respects STAGECHAIN_HOME environment variable; falls back to ~/.stagechain.
    """
    home = os.environ.get("STAGECHAIN_HOME", "").strip()
    if home:
        return ensure_dir(Path(home))
    return ensure_dir(Path.home() / ".stagechain")
