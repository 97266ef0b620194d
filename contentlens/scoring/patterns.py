"""
Phrase-pattern library for the phrase density feature.

Rules are declarative {pattern, weight, category} records loaded once at
initialization, from phrase_data.py by default or from a YAML override for
tuning. Matching logic lives here; the scorer only sees the resulting density.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import yaml

from contentlens.config import PHRASE_DENSITY_CEILING, PHRASE_MATCH_CAP, PHRASE_RULES_PATH
from contentlens.observability.logging import get_logger
from contentlens.scoring.phrase_data import HIGH_SIGNAL_CATEGORY, HIGH_SIGNAL_RULES, PHRASE_RULES

logger = get_logger(__name__)


@dataclass(frozen=True)
class PhraseRule:
    """One AI-stylistic phrase pattern."""

    pattern: str
    weight: float = 1.0
    category: str = "uncategorized"


def default_phrase_rules() -> list[PhraseRule]:
    """Base library followed by the high-signal subset."""
    rules = [PhraseRule(pattern=p, category=c) for p, c in PHRASE_RULES]
    rules.extend(PhraseRule(pattern=p, category=HIGH_SIGNAL_CATEGORY) for p in HIGH_SIGNAL_RULES)
    return rules


def load_phrase_rules(path: Path) -> list[PhraseRule]:
    """
    Load a rule table from YAML.

    Expected shape::

        rules:
          - pattern: "\\bspot on\\b"
            weight: 1.0
            category: social_agreement

    Entries missing a pattern are skipped with a warning. A missing file or a
    file without a `rules` list yields the default library.
    """
    if not path.exists():
        logger.warning("Phrase rules not found at %s, using default library", path)
        return default_phrase_rules()

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    entries = data.get("rules") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        logger.warning("Phrase rules at %s have no 'rules' list, using default library", path)
        return default_phrase_rules()

    rules: list[PhraseRule] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry.get("pattern"):
            logger.warning("Skipping phrase rule #%d in %s: missing pattern", idx, path)
            continue
        rules.append(
            PhraseRule(
                pattern=str(entry["pattern"]),
                weight=float(entry.get("weight", 1.0)),
                category=str(entry.get("category", "uncategorized")),
            )
        )
    return rules


class PhraseLibrary:
    """
    Compiled phrase rules.

    Each rule contributes weight * min(matches, match_cap); the total is
    divided by `ceiling` and clamped to 1 to produce the density.
    """

    def __init__(
        self,
        rules: list[PhraseRule] | None = None,
        ceiling: float = PHRASE_DENSITY_CEILING,
        match_cap: int = PHRASE_MATCH_CAP,
    ):
        if ceiling <= 0:
            raise ValueError("ceiling must be positive")
        self.ceiling = ceiling
        self.match_cap = match_cap
        self._compiled: list[tuple[re.Pattern[str], PhraseRule]] = []

        for rule in rules if rules is not None else default_phrase_rules():
            try:
                self._compiled.append((re.compile(rule.pattern, re.IGNORECASE), rule))
            except re.error as e:
                logger.warning("Skipping invalid phrase pattern %r: %s", rule.pattern, e)

        logger.debug("PhraseLibrary initialized: %d rules", len(self._compiled))

    def __len__(self) -> int:
        return len(self._compiled)

    def _capped_count(self, pattern: re.Pattern[str], text: str) -> int:
        count = 0
        for _ in pattern.finditer(text):
            count += 1
            if count >= self.match_cap:
                break
        return count

    def raw_score(self, text: str) -> float:
        """Weighted, per-rule-capped match total."""
        total = 0.0
        for pattern, rule in self._compiled:
            hits = self._capped_count(pattern, text)
            if hits:
                total += rule.weight * hits
        return total

    def density(self, text: str) -> float:
        return min(1.0, self.raw_score(text) / self.ceiling)

    def category_hits(self, text: str) -> dict[str, int]:
        """Capped match counts per category (diagnostics only)."""
        hits: Counter[str] = Counter()
        for pattern, rule in self._compiled:
            n = self._capped_count(pattern, text)
            if n:
                hits[rule.category] += n
        return dict(hits)


@lru_cache(maxsize=1)
def get_phrase_library() -> PhraseLibrary:
    """Process-wide library, built once from CONTENTLENS_PHRASE_RULES or the defaults."""
    if PHRASE_RULES_PATH:
        return PhraseLibrary(load_phrase_rules(Path(PHRASE_RULES_PATH)))
    return PhraseLibrary()
