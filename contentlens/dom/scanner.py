"""
Candidate Selector: find scorable text blocks in a live document.

Two passes:

1. Targeted: site selectors from selector_data.REPLY_SELECTOR_GROUPS. Matches
   are trusted (no UI-chrome heuristics) and use a lower length floor.
2. Generic: a pruned depth-first walk accepting leaf text blocks that pass
   the dominance rule. Skipped on PASS1_ONLY_HOSTS.

Blocks are deduplicated by content key across both passes, first seen wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

import soupsieve as sv
from bs4 import Tag

from contentlens.config import (
    BLOCK_CHILD_MAX_CHARS,
    DOMINANCE_RATIO,
    PROCESSED_MARKER_ATTR,
    TARGETED_MIN_LENGTH,
)
from contentlens.contracts.settings import DEFAULT_SETTINGS
from contentlens.contracts.types import TextBlock
from contentlens.dom.document import PageDocument, text_content
from contentlens.dom.selector_data import (
    BLOCK_TAGS,
    EXCLUDED_ROLES,
    EXCLUDED_TAGS,
    EXCLUDED_TEST_IDS,
    HIDDEN_STYLE_RE,
    PASS1_ONLY_HOSTS,
    REPLY_SELECTOR_GROUPS,
    SWEEP_SELECTOR_GROUPS,
    UI_PATTERN_RE,
)
from contentlens.observability.logging import get_logger
from contentlens.observability.telemetry import counter, time_block
from contentlens.scoring.text import hash_text, normalize_text

logger = get_logger(__name__)


def compile_selector_groups(groups: Mapping[str, Iterable[str]]) -> dict[str, sv.SoupSieve]:
    """Compile each group into one selector list; invalid groups are dropped."""
    compiled: dict[str, sv.SoupSieve] = {}
    for name, selectors in groups.items():
        try:
            compiled[name] = sv.compile(", ".join(selectors))
        except sv.SelectorSyntaxError as e:
            counter("selector.invalid")
            logger.warning("Skipping selector group %s: %s", name, e)
    return compiled


def _child_tags(el: Tag) -> list[Tag]:
    return [c for c in el.children if isinstance(c, Tag)]


class CandidateSelector:
    """
    Identifies scorable elements.

    `min_text_length` is read on every check, so assigning a new value (or
    calling set_min_text_length) takes effect on the next scan.
    """

    def __init__(
        self,
        min_text_length: int = DEFAULT_SETTINGS.min_text_length,
        targeted_min_length: int = TARGETED_MIN_LENGTH,
        selector_groups: Mapping[str, Iterable[str]] | None = None,
        pass1_only_hosts: Iterable[str] = PASS1_ONLY_HOSTS,
        sweep_groups: Mapping[str, Iterable[str]] | None = None,
    ):
        self.min_text_length = min_text_length
        self.targeted_min_length = targeted_min_length
        self.pass1_only_hosts = frozenset(pass1_only_hosts)
        self._groups = compile_selector_groups(
            selector_groups if selector_groups is not None else REPLY_SELECTOR_GROUPS
        )
        self._sweep_groups = compile_selector_groups(
            sweep_groups if sweep_groups is not None else SWEEP_SELECTOR_GROUPS
        )

    def set_min_text_length(self, value: int) -> None:
        self.min_text_length = value

    @property
    def group_names(self) -> list[str]:
        return list(self._groups)

    # ------------------------------------------------------------------
    # Element predicates
    # ------------------------------------------------------------------

    def is_content_candidate(self, el: Tag, trusted: bool = False) -> bool:
        """Exclusion checks. Trusted (targeted) matches skip the UI heuristics."""
        if el.name in EXCLUDED_TAGS:
            return False
        if el.get("role") in EXCLUDED_ROLES:
            return False
        if el.get("data-testid") in EXCLUDED_TEST_IDS:
            return False
        if trusted:
            return True

        el_id = el.get("id") or ""
        classes = " ".join(el.get("class") or [])
        if UI_PATTERN_RE.search(el_id) or UI_PATTERN_RE.search(classes):
            return False
        if el.has_attr("hidden"):
            return False
        if HIDDEN_STYLE_RE.search(el.get("style") or ""):
            return False
        return True

    def is_scorable(self, el: Tag, lengths: dict[int, int] | None = None) -> bool:
        """Leaf-text check: minimum length plus the dominance rule."""
        total = self._trimmed_len(el, lengths)
        if total < self.min_text_length:
            return False

        for child in _child_tags(el):
            child_len = self._trimmed_len(child, lengths)
            # One child holding most of the text: score the child instead
            if child_len >= total * DOMINANCE_RATIO:
                return False
            if child.name in BLOCK_TAGS and child_len > BLOCK_CHILD_MAX_CHARS:
                return False
        return True

    @staticmethod
    def _trimmed_len(el: Tag, lengths: dict[int, int] | None) -> int:
        if lengths is None:
            return len(text_content(el).strip())
        key = id(el)
        if key not in lengths:
            lengths[key] = len(text_content(el).strip())
        return lengths[key]

    # ------------------------------------------------------------------
    # Targeted matching
    # ------------------------------------------------------------------

    def _select_groups(
        self, groups: Mapping[str, sv.SoupSieve], root: Tag, include_self: bool
    ) -> list[Tag]:
        seen: set[int] = set()
        matches: list[Tag] = []
        for name, compiled in groups.items():
            try:
                found = compiled.select(root)
                if include_self and compiled.match(root):
                    found.insert(0, root)
            except Exception as e:
                counter("selector.error")
                logger.debug("Selector group %s failed: %s", name, e)
                continue
            for el in found:
                if id(el) not in seen:
                    seen.add(id(el))
                    matches.append(el)
        return matches

    def select_targeted(self, root: Tag, include_self: bool = False) -> list[Tag]:
        """All elements under `root` matched by any reply selector group."""
        return self._select_groups(self._groups, root, include_self)

    def matches_targeted(self, el: Tag) -> bool:
        for name, compiled in self._groups.items():
            try:
                if compiled.match(el):
                    return True
            except Exception as e:
                counter("selector.error")
                logger.debug("Selector group %s failed: %s", name, e)
        return False

    # ------------------------------------------------------------------
    # Generic walk
    # ------------------------------------------------------------------

    def walk(self, root: Tag) -> Iterator[Tag]:
        """Document-order walk; a rejected element prunes its whole subtree.

        The root itself is always yielded.
        """
        yield root
        stack = list(reversed(_child_tags(root)))
        while stack:
            el = stack.pop()
            if not self.is_content_candidate(el):
                continue
            yield el
            stack.extend(reversed(_child_tags(el)))

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def scan(self, document: PageDocument, root: Tag | None = None) -> list[TextBlock]:
        """Full two-pass scan of `root` (default: the document body)."""
        base = root if root is not None else document.body
        blocks: list[TextBlock] = []
        seen_keys: set[str] = set()
        seen_elements: set[int] = set()

        def accept(el: Tag, normalized: str) -> None:
            key = hash_text(normalized)
            if key in seen_keys:
                return
            seen_keys.add(key)
            blocks.append(TextBlock.for_element(key, normalized, el))

        with time_block("scan.latency"):
            for el in self.select_targeted(base):
                seen_elements.add(id(el))
                if not self.is_content_candidate(el, trusted=True):
                    continue
                normalized = normalize_text(text_content(el))
                if len(normalized) >= self.targeted_min_length:
                    accept(el, normalized)
            targeted = len(blocks)

            if document.hostname not in self.pass1_only_hosts:
                lengths: dict[int, int] = {}
                for el in self.walk(base):
                    if id(el) in seen_elements or not self.is_scorable(el, lengths):
                        continue
                    normalized = normalize_text(text_content(el))
                    if len(normalized) >= self.min_text_length:
                        accept(el, normalized)

        counter("scan.blocks", len(blocks))
        logger.debug(
            "Scan on %s: %d targeted, %d generic blocks",
            document.hostname or "<no host>",
            targeted,
            len(blocks) - targeted,
        )
        return blocks

    def extract_block(self, el: Tag, document: PageDocument | None = None) -> TextBlock | None:
        """Single-element extraction for incremental updates.

        Applies the same checks as scan(): exclusions (UI heuristics only for
        elements outside the reply selectors) and, for those, the dominance
        rule. Returns None for detached or rejected elements and for text below
        the applicable floor.
        """
        if document is not None and not document.contains(el):
            return None
        targeted = self.matches_targeted(el)
        if not self.is_content_candidate(el, trusted=targeted):
            return None
        if not targeted and not self.is_scorable(el):
            return None
        normalized = normalize_text(text_content(el))
        floor = self.targeted_min_length if targeted else self.min_text_length
        if len(normalized) < floor:
            return None
        return TextBlock.for_element(hash_text(normalized), normalized, el)

    def collect_candidates(self, root: Tag, allow_generic: bool = True) -> list[Tag]:
        """Elements under (and including) an added node worth extracting."""
        candidates = [
            el
            for el in self.select_targeted(root, include_self=True)
            if self.is_content_candidate(el, trusted=True)
        ]
        if not allow_generic:
            return candidates

        seen = {id(el) for el in candidates}
        lengths: dict[int, int] = {}
        for el in self.walk(root):
            if id(el) in seen:
                continue
            if el is root and not self.is_content_candidate(el):
                continue
            if self.is_scorable(el, lengths):
                seen.add(id(el))
                candidates.append(el)
        return candidates

    def sweep(self, document: PageDocument, root: Tag | None = None) -> list[Tag]:
        """Targeted elements on a sweep host that still need processing.

        An element needs processing when it has no processed marker, or when
        its marker no longer matches its current content key (a recycled node).
        """
        groups = {
            name: compiled
            for name, compiled in self._sweep_groups.items()
            if name == document.hostname
        }
        if not groups:
            groups = self._groups
        base = root if root is not None else document.body

        stale: list[Tag] = []
        for el in self._select_groups(groups, base, include_self=False):
            if not self.is_content_candidate(el, trusted=True):
                continue
            normalized = normalize_text(text_content(el))
            if len(normalized) < self.targeted_min_length:
                continue
            if el.get(PROCESSED_MARKER_ATTR) != hash_text(normalized):
                stale.append(el)
        return stale
