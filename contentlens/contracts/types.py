"""
Module: types
Purpose: Shared value types for the scoring pipeline.
Dependencies: bs4 (type-only)

Stable import boundary: these types flow between the scanner, scorer, cache
tiers and orchestrator. Keeping them in a leaf module prevents circular
imports between dom/, scoring/ and pipeline/.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bs4 import Tag


# ---------------------------------------------------------------------------
# Candidate block (from dom/scanner.py)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextBlock:
    """A scorable region of the live document.

    The block holds only a weak back-reference to its element; the document
    owns the element's lifetime. Discard the block once it has been scored.
    """

    content_key: str
    normalized_text: str
    element_ref: weakref.ReferenceType[Tag] = field(repr=False, compare=False)

    @classmethod
    def for_element(cls, content_key: str, normalized_text: str, element: Tag) -> TextBlock:
        return cls(
            content_key=content_key,
            normalized_text=normalized_text,
            element_ref=weakref.ref(element),
        )

    @property
    def element(self) -> Tag | None:
        """The element, or None if it has been garbage collected."""
        return self.element_ref()


# ---------------------------------------------------------------------------
# Feature vector (from scoring/features.py)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FeatureVector:
    """Eight bounded features in [0, 1] plus the raw average sentence length."""

    lexical_diversity: float
    repetition: float
    sentence_length_variance: float
    entropy: float
    phrase_density: float
    sentence_length_signal: float
    punctuation_density: float
    list_likeness: float
    avg_sentence_length: float

    def as_dict(self) -> dict[str, float]:
        return {
            "lexical_diversity": self.lexical_diversity,
            "repetition": self.repetition,
            "sentence_length_variance": self.sentence_length_variance,
            "entropy": self.entropy,
            "phrase_density": self.phrase_density,
            "sentence_length_signal": self.sentence_length_signal,
            "punctuation_density": self.punctuation_density,
            "list_likeness": self.list_likeness,
            "avg_sentence_length": self.avg_sentence_length,
        }


# ---------------------------------------------------------------------------
# Cache entries (from storage/)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScoreCacheEntry:
    """A cached score. Session-tier entries expire `ttl` seconds after insertion."""

    content_key: str
    score: int
    inserted_at: float
    ttl: float | None = None

    def is_expired(self, now: float) -> bool:
        if self.ttl is None:
            return False
        return now - self.inserted_at > self.ttl
