"""
Environment loader for ContentLens.

Configuration constants in contentlens.config read CONTENTLENS_* variables;
this module makes sure a project-level .env file is applied first.

Side Effects:
    - Loads .env file from the nearest ancestor directory that has one
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

_ENV_LOADED = False


def ensure_env_loaded(env_path: Path | None = None) -> None:
    """
    Ensure the .env file is loaded exactly once.

    Existing process variables win over values from the file.

    Args:
        env_path: Optional path to .env file. If None, searches upward from
            this package for one, then falls back to the working directory.
    """
    global _ENV_LOADED
    if _ENV_LOADED:
        return

    if env_path is None:
        current = Path(__file__).parent
        while current != current.parent:
            env_candidate = current / ".env"
            if env_candidate.exists():
                env_path = env_candidate
                break
            current = current.parent

    if env_path and env_path.exists():
        load_dotenv(env_path, override=False)
    else:
        load_dotenv(override=False)
    _ENV_LOADED = True


def get_env_int(name: str, default: int) -> int:
    """Read an integer env var, falling back to default on absence or garbage."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_env_float(name: str, default: float) -> float:
    """Read a float env var, falling back to default on absence or garbage."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default
