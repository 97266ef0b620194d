"""Text canonicalization and content keys.

Runs on every candidate during every scan, so it stays allocation-light:
two precompiled regex passes and a single integer loop.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

_ZERO_WIDTH_RE = re.compile(r"[\u200b-\u200d\ufeff]")
_WHITESPACE_RE = re.compile(r"\s+")

_DJB2_SEED = 5381
_MASK_32 = 0xFFFFFFFF


def normalize_text(raw: str) -> str:
    """Lowercase, strip zero-width characters, collapse whitespace, trim.

    Zero-width characters are removed before whitespace is collapsed so that
    normalize_text(normalize_text(x)) == normalize_text(x).
    """
    text = _ZERO_WIDTH_RE.sub("", raw.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def _utf16_units(text: str) -> Iterator[int]:
    for ch in text:
        cp = ord(ch)
        if cp > 0xFFFF:
            cp -= 0x10000
            yield 0xD800 | (cp >> 10)
            yield 0xDC00 | (cp & 0x3FF)
        else:
            yield cp


def hash_text(normalized: str) -> str:
    """djb2 (xor variant) over UTF-16 code units, as 8 lowercase hex digits.

    Code units rather than code points keep keys identical to the ones the
    browser extension persisted for the same text.
    """
    value = _DJB2_SEED
    for unit in _utf16_units(normalized):
        value = (((value << 5) + value) ^ unit) & _MASK_32
    return f"{value:08x}"


def content_key(raw: str) -> str:
    """Shortcut for hash_text(normalize_text(raw))."""
    return hash_text(normalize_text(raw))
