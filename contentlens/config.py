"""Centralized configuration for the ContentLens scoring core.

Typed constants for scoring, candidate selection, cache tiers, mutation
monitoring and persisted storage. Environment variable overrides
(CONTENTLENS_*) use safe defaults so the core starts without extra
configuration. User-facing settings (threshold, mode, ...) are NOT here; they
live in contentlens.contracts.settings and are persisted per profile.
"""

from __future__ import annotations

import os
from pathlib import Path

from contentlens.infrastructure.env import ensure_env_loaded, get_env_float, get_env_int

ensure_env_loaded()

# --- App ---
APP_VERSION: str = "1.0.0"

# --- Scoring ---
MIN_SCORABLE_CHARS: int = 12
SHORT_TEXT_CHARS: int = 30
PHRASE_DENSITY_CEILING: float = 5.0
PHRASE_MATCH_CAP: int = 2
FALLBACK_SCORE: int = 1
PHRASE_RULES_PATH: str | None = os.getenv("CONTENTLENS_PHRASE_RULES") or None

# --- Candidate Selector ---
TARGETED_MIN_LENGTH: int = 25
DOMINANCE_RATIO: float = 0.7
BLOCK_CHILD_MAX_CHARS: int = 100
PROCESSED_MARKER_ATTR: str = "data-cl-key"

# --- Cache tiers ---
SESSION_CACHE_MAX_ENTRIES: int = get_env_int("CONTENTLENS_SESSION_CACHE_MAX", 500)
SESSION_CACHE_TTL_SECONDS: float = get_env_float("CONTENTLENS_SESSION_CACHE_TTL", 30 * 60.0)
DURABLE_CACHE_MAX_ENTRIES: int = get_env_int("CONTENTLENS_DURABLE_CACHE_MAX", 2000)

# --- Mutation Monitor ---
MUTATION_DEBOUNCE_SECONDS: float = get_env_float("CONTENTLENS_DEBOUNCE", 0.08)
SWEEP_INTERVAL_SECONDS: float = get_env_float("CONTENTLENS_SWEEP_INTERVAL", 1.2)
NAV_POLL_INTERVAL_SECONDS: float = get_env_float("CONTENTLENS_NAV_POLL_INTERVAL", 0.8)
NAV_SETTLE_SECONDS: float = get_env_float("CONTENTLENS_NAV_SETTLE", 1.2)
SPA_INITIAL_SCAN_DELAY_SECONDS: float = get_env_float("CONTENTLENS_SPA_SCAN_DELAY", 1.5)
QUEUE_BATCH_SIZE: int = get_env_int("CONTENTLENS_QUEUE_BATCH_SIZE", 50)
QUEUE_MAX_PENDING: int = get_env_int("CONTENTLENS_QUEUE_MAX_PENDING", 1000)

# --- Storage ---
SETTINGS_STORAGE_KEY: str = "cl_settings"
SCORE_CACHE_STORAGE_KEY: str = "cl_score_cache"
SCORE_CACHE_VERSION_KEY: str = "cl_score_cache_version"
DB_PATH: Path = Path(
    os.getenv("CONTENTLENS_DB_PATH", str(Path.home() / ".contentlens" / "contentlens.db"))
)
DB_CONNECT_TIMEOUT: float = get_env_float("CONTENTLENS_DB_CONNECT_TIMEOUT", 5.0)
DB_RETRY_MAX: int = get_env_int("CONTENTLENS_DB_RETRY_MAX", 5)
DB_RETRY_BASE_DELAY: float = get_env_float("CONTENTLENS_DB_RETRY_BASE_DELAY", 0.05)
DB_RETRY_MAX_DELAY: float = get_env_float("CONTENTLENS_DB_RETRY_MAX_DELAY", 1.0)
DB_RETRY_JITTER: float = 0.1
