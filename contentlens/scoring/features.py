"""Feature extraction for the composite AI-likelihood scorer.

Every feature is computed from normalized text and bounded to [0, 1], except
the raw average sentence length which the scorer consumes directly.
"""

from __future__ import annotations

import math
import re
from collections import Counter

from contentlens.contracts.types import FeatureVector
from contentlens.scoring.patterns import PhraseLibrary, get_phrase_library
from contentlens.scoring.phrase_data import EM_DASH, LIST_MARKER_PATTERNS, STRUCTURAL_PUNCTUATION

_TOKEN_RE = re.compile(r"\b[a-z']+\b")
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_LIST_MARKER_RES = tuple(re.compile(p, re.IGNORECASE | re.MULTILINE) for p in LIST_MARKER_PATTERNS)

MIN_SENTENCE_CHARS = 6


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text.lower())


def split_sentences(text: str) -> list[str]:
    """Split on trailing .!? and drop fragments shorter than MIN_SENTENCE_CHARS."""
    sentences = (s.strip() for s in _SENTENCE_SPLIT_RE.split(text))
    return [s for s in sentences if len(s) >= MIN_SENTENCE_CHARS]


def _word_count(sentence: str) -> int:
    return len(sentence.split())


def lexical_diversity(tokens: list[str]) -> float:
    """Unique-token ratio. Neutral 0.5 when there are no tokens."""
    if not tokens:
        return 0.5
    return len(set(tokens)) / len(tokens)


def repetition_score(tokens: list[str]) -> float:
    """1 - unique/total word bigrams, amplified x3."""
    if len(tokens) < 3:
        return 0.0
    bigrams = list(zip(tokens, tokens[1:]))
    repetition = 1 - len(set(bigrams)) / len(bigrams)
    return min(1.0, repetition * 3)


def sentence_length_variance(sentences: list[str]) -> float:
    """Population std-dev of sentence word counts / 10. Neutral 0.5 below two sentences."""
    if len(sentences) < 2:
        return 0.5
    lengths = [_word_count(s) for s in sentences]
    mean = sum(lengths) / len(lengths)
    variance = sum((n - mean) ** 2 for n in lengths) / len(lengths)
    return min(1.0, math.sqrt(variance) / 10)


def entropy_score(text: str) -> float:
    """Shannon entropy (bits) of character bigrams / 10."""
    total = len(text) - 1
    if total <= 0:
        return 0.5
    freq = Counter(text[i : i + 2] for i in range(total))
    entropy = 0.0
    for count in freq.values():
        p = count / total
        entropy -= p * math.log2(p)
    return min(1.0, entropy / 10)


def average_sentence_length(sentences: list[str]) -> float:
    if not sentences:
        return 0.0
    return sum(_word_count(s) for s in sentences) / len(sentences)


def sentence_length_signal(avg_length: float) -> float:
    """Ramp from 0 at 10 words/sentence to 1 at 30."""
    if avg_length <= 10:
        return 0.0
    return min(1.0, (avg_length - 10) / 20)


def punctuation_density(text: str) -> float:
    """Structural punctuation marks per 10 characters."""
    if not text:
        return 0.0
    marks = sum(1 for ch in text if ch in STRUCTURAL_PUNCTUATION)
    return min(1.0, marks / (len(text) / 10))


def list_likeness(text: str) -> float:
    matched = sum(1 for pattern in _LIST_MARKER_RES if pattern.search(text))
    return min(1.0, matched / 2)


def em_dash_signal(text: str) -> float:
    """Em-dash count / 3. Two or more in a short reply is already a strong signal."""
    return min(1.0, text.count(EM_DASH) / 3)


def extract_features(text: str, library: PhraseLibrary | None = None) -> FeatureVector:
    """Compute the full feature vector for normalized text."""
    phrases = library if library is not None else get_phrase_library()
    tokens = tokenize(text)
    sentences = split_sentences(text)
    avg_length = average_sentence_length(sentences)

    return FeatureVector(
        lexical_diversity=lexical_diversity(tokens),
        repetition=repetition_score(tokens),
        sentence_length_variance=sentence_length_variance(sentences),
        entropy=entropy_score(text),
        phrase_density=phrases.density(text),
        sentence_length_signal=sentence_length_signal(avg_length),
        punctuation_density=punctuation_density(text),
        list_likeness=list_likeness(text),
        avg_sentence_length=avg_length,
    )
