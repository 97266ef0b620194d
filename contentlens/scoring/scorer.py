"""
Composite AI-likelihood scorer.

Maps normalized text to an integer score 1-10 (higher = more AI-like). Pure
function of the text and the weights: no I/O, no hidden state, so a score can
be cached indefinitely under its content key for a given SCORING_VERSION.

Weights (full branch):

    Feature                    Weight   Direction
    lexical_diversity          0.13     inverted (low diversity -> AI)
    repetition                 0.10
    sentence_length_variance   0.12     inverted (uniform sentences -> AI)
    entropy                    0.09     inverted (low entropy -> AI)
    phrase_density             0.38     strongest signal
    sentence_length_signal     0.05
    punctuation_density        0.04
    list_likeness              0.09
    + phrase boost up to 0.12, em-dash boost up to 0.12

The short-text branch and the full branch are calibrated separately; the
bucket edges and weights are tuning constants, not derived from each other.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from contentlens.config import MIN_SCORABLE_CHARS, SHORT_TEXT_CHARS
from contentlens.contracts.types import FeatureVector
from contentlens.scoring.features import em_dash_signal, extract_features
from contentlens.scoring.patterns import PhraseLibrary, get_phrase_library

# Bump whenever weights, thresholds or the phrase library change in a way that
# alters scores; persisted caches written under another version are dropped.
SCORING_VERSION = "1"

MIN_SCORE = 1
MAX_SCORE = 10


@dataclass(frozen=True)
class ScoringWeights:
    lexical_diversity: float = 0.13
    repetition: float = 0.10
    sentence_length_variance: float = 0.12
    entropy: float = 0.09
    phrase_density: float = 0.38
    sentence_length_signal: float = 0.05
    punctuation_density: float = 0.04
    list_likeness: float = 0.09

    phrase_boost_high: float = 0.12
    phrase_boost_medium: float = 0.06
    phrase_boost_high_at: float = 0.6
    phrase_boost_medium_at: float = 0.4

    em_dash_boost_high: float = 0.12
    em_dash_boost_medium: float = 0.06
    em_dash_boost_high_at: float = 0.66
    em_dash_boost_medium_at: float = 0.33


# (minimum signal, score) checked top-down for one-line replies
SHORT_TEXT_BUCKETS: tuple[tuple[float, int], ...] = ((0.65, 8), (0.45, 6), (0.25, 4))

DEFAULT_WEIGHTS = ScoringWeights()


def _clamp_score(value: float) -> int:
    # half-up rounding, not banker's rounding
    return max(MIN_SCORE, min(MAX_SCORE, math.floor(value + 0.5)))


def _boost(signal: float, high_at: float, high: float, medium_at: float, medium: float) -> float:
    if signal >= high_at:
        return high
    if signal >= medium_at:
        return medium
    return 0.0


class CompositeScorer:
    """Weighted heuristic composite over the extracted feature vector."""

    def __init__(
        self,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        library: PhraseLibrary | None = None,
        min_chars: int = MIN_SCORABLE_CHARS,
        short_text_chars: int = SHORT_TEXT_CHARS,
    ):
        self.weights = weights
        self.library = library if library is not None else get_phrase_library()
        self.min_chars = min_chars
        self.short_text_chars = short_text_chars

    def score(self, text: str) -> int:
        trimmed = text.strip()
        if len(trimmed) < self.min_chars:
            return MIN_SCORE

        features = extract_features(trimmed, self.library)
        em_dash = em_dash_signal(trimmed)

        if len(trimmed) < self.short_text_chars:
            return self.score_short(features.phrase_density, em_dash)
        return self.combine(features, em_dash)

    @staticmethod
    def score_short(phrase_density: float, em_dash: float) -> int:
        """Short replies carry mostly phrase signal: bucket the stronger of the two."""
        signal = max(phrase_density, em_dash)
        for minimum, bucket_score in SHORT_TEXT_BUCKETS:
            if signal >= minimum:
                return bucket_score
        return MIN_SCORE

    def raw_composite(self, features: FeatureVector, em_dash: float) -> float:
        """Weighted sum clamped to [0, 1]."""
        w = self.weights
        inverted_diversity = 1 - features.lexical_diversity
        inverted_variance = 1 - min(1.0, features.sentence_length_variance)
        inverted_entropy = 1 - features.entropy

        phrase_boost = _boost(
            features.phrase_density,
            w.phrase_boost_high_at,
            w.phrase_boost_high,
            w.phrase_boost_medium_at,
            w.phrase_boost_medium,
        )
        em_dash_boost = _boost(
            em_dash,
            w.em_dash_boost_high_at,
            w.em_dash_boost_high,
            w.em_dash_boost_medium_at,
            w.em_dash_boost_medium,
        )

        total = (
            inverted_diversity * w.lexical_diversity
            + features.repetition * w.repetition
            + inverted_variance * w.sentence_length_variance
            + inverted_entropy * w.entropy
            + features.phrase_density * w.phrase_density
            + features.sentence_length_signal * w.sentence_length_signal
            + features.punctuation_density * w.punctuation_density
            + features.list_likeness * w.list_likeness
            + phrase_boost
            + em_dash_boost
        )
        return max(0.0, min(1.0, total))

    def combine(self, features: FeatureVector, em_dash: float) -> int:
        """Map the composite onto 1 + sum*9, rounded and clamped to [1, 10]."""
        return _clamp_score(1 + self.raw_composite(features, em_dash) * 9)


_DEFAULT_SCORER: CompositeScorer | None = None


def score_text(text: str) -> int:
    """Score with the default weights and phrase library."""
    global _DEFAULT_SCORER
    if _DEFAULT_SCORER is None:
        _DEFAULT_SCORER = CompositeScorer()
    return _DEFAULT_SCORER.score(text)
