"""
User-facing settings model (Pydantic v2).

Persisted under contentlens.config.SETTINGS_STORAGE_KEY and pushed to the
running session whenever the settings collaborator changes them. The core
only reads enabled/domain_rules/min_text_length; threshold and mode are
passed through to the renderer, which owns filtering decisions.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FilterMode(str, Enum):
    """Visual action the renderer applies to elements at or above threshold."""

    HIDE = "hide"
    BLUR = "blur"
    HIGHLIGHT = "highlight"
    BADGE = "badge"


class DomainRule(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


class ExtensionSettings(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    enabled: bool = True
    threshold: int = Field(default=7, ge=1, le=10)
    mode: FilterMode = FilterMode.BLUR
    domain_rules: dict[str, DomainRule] = Field(default_factory=dict)
    min_text_length: int = Field(default=80, ge=1)

    def is_host_disabled(self, hostname: str) -> bool:
        return self.domain_rules.get(hostname) == DomainRule.DISABLED

    def merged(self, updates: dict[str, Any]) -> ExtensionSettings:
        """Return a validated copy with `updates` applied over these values."""
        data = self.model_dump()
        data.update(updates)
        return ExtensionSettings.model_validate(data)


DEFAULT_SETTINGS = ExtensionSettings()
