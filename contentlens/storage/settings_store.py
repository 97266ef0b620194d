"""Load, merge and persist ExtensionSettings."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from contentlens.config import SETTINGS_STORAGE_KEY
from contentlens.contracts.settings import DEFAULT_SETTINGS, ExtensionSettings
from contentlens.infrastructure.store import KeyValueStore
from contentlens.observability.logging import get_logger
from contentlens.observability.telemetry import counter

logger = get_logger(__name__)


class SettingsStore:
    def __init__(self, store: KeyValueStore, storage_key: str = SETTINGS_STORAGE_KEY):
        self.store = store
        self.storage_key = storage_key

    async def load(self) -> ExtensionSettings:
        """Stored settings merged over the defaults.

        A stored blob that is not a mapping or fails validation is ignored,
        and so is a store that cannot be read.
        """
        try:
            raw = await self.store.get(self.storage_key)
        except Exception as e:
            counter("settings.store_error")
            logger.warning("Settings unreadable, using defaults: %s", e)
            return DEFAULT_SETTINGS
        if raw is None:
            return DEFAULT_SETTINGS
        if not isinstance(raw, dict):
            counter("settings.malformed")
            logger.warning("Ignoring stored settings: expected an object, got %s", type(raw).__name__)
            return DEFAULT_SETTINGS
        try:
            return DEFAULT_SETTINGS.merged(raw)
        except ValidationError as e:
            counter("settings.malformed")
            logger.warning("Ignoring invalid stored settings (%d errors)", e.error_count())
            return DEFAULT_SETTINGS

    async def save(self, settings: ExtensionSettings) -> None:
        """Persist settings. A failed write is logged; the caller keeps its copy."""
        try:
            await self.store.set(self.storage_key, settings.model_dump(mode="json"))
        except Exception as e:
            counter("settings.store_error")
            logger.warning("Could not persist settings: %s", e)

    async def update(self, updates: dict[str, Any]) -> ExtensionSettings:
        """Merge a partial update over the current settings and persist it.

        Raises:
            ValidationError: if the merged settings are invalid (nothing is saved)
        """
        current = await self.load()
        settings = current.merged(updates)
        await self.save(settings)
        return settings
