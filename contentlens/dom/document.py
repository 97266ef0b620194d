"""
Module: document
Purpose: Live document collaborator backed by a BeautifulSoup tree.
Dependencies: bs4

The core never owns elements. It holds weak references to `bs4.Tag` handles
and re-validates them with `is_attached` before acting. All structural edits
go through PageDocument so observers receive mutation records the same way a
browser MutationObserver would deliver them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import urlparse

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

from contentlens.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PARSER = "html.parser"


@dataclass
class MutationRecord:
    """One structural or text change.

    kind is "childList" (nodes added/removed under target) or
    "characterData" (target's text replaced in place).
    """

    kind: str
    target: Tag
    added_nodes: list[PageElement] = field(default_factory=list)
    removed_nodes: list[PageElement] = field(default_factory=list)

    def added_elements(self) -> list[Tag]:
        return [n for n in self.added_nodes if isinstance(n, Tag)]


MutationCallback = Callable[[list[MutationRecord]], None]


def text_content(el: PageElement) -> str:
    """Concatenated text of the node and its descendants (DOM textContent)."""
    if isinstance(el, Tag):
        return el.get_text()
    return str(el)


def is_attached(el: PageElement | None, root: Tag) -> bool:
    """True if `el` is `root` or still hangs beneath it.

    Identity only: bs4 compares tags structurally, so two identical comments
    in different places would otherwise be confused.
    """
    if el is None:
        return False
    if el is root:
        return True
    return any(parent is root for parent in el.parents)


def _parse_fragment(html: str) -> list[PageElement]:
    fragment = BeautifulSoup(html, DEFAULT_PARSER)
    return [node.extract() for node in list(fragment.contents)]


class PageDocument:
    """A page: URL, parsed tree and mutation observers."""

    def __init__(self, html: str, url: str = "about:blank", parser: str = DEFAULT_PARSER):
        self.soup = BeautifulSoup(html, parser)
        self.url = url
        self._observers: list[MutationCallback] = []

    @classmethod
    def from_file(cls, path: str, url: str = "about:blank") -> PageDocument:
        with open(path, encoding="utf-8") as f:
            return cls(f.read(), url=url)

    @property
    def hostname(self) -> str:
        return urlparse(self.url).hostname or ""

    @property
    def body(self) -> Tag:
        """<body> if present, else the document root."""
        return self.soup.body or self.soup

    @property
    def root(self) -> Tag:
        return self.soup

    def contains(self, el: PageElement | None) -> bool:
        return is_attached(el, self.soup)

    def select(self, selector: str) -> list[Tag]:
        return self.soup.select(selector)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def observe(self, callback: MutationCallback) -> None:
        if callback not in self._observers:
            self._observers.append(callback)

    def disconnect(self, callback: MutationCallback) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def _notify(self, records: list[MutationRecord]) -> None:
        for callback in list(self._observers):
            callback(records)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def append_html(self, parent: Tag, html: str) -> list[Tag]:
        """Parse `html` and append its nodes to `parent`. Returns the added tags."""
        nodes = _parse_fragment(html)
        for node in nodes:
            parent.append(node)
        self._notify([MutationRecord("childList", parent, added_nodes=nodes)])
        return [n for n in nodes if isinstance(n, Tag)]

    def remove(self, el: Tag) -> None:
        parent = el.parent
        el.extract()
        if parent is not None:
            self._notify([MutationRecord("childList", parent, removed_nodes=[el])])

    def set_text(self, el: Tag, text: str) -> None:
        """Replace the element's children with a single text node."""
        el.clear()
        el.append(NavigableString(text))
        self._notify([MutationRecord("characterData", el)])

    def replace_children(self, el: Tag, html: str) -> list[Tag]:
        """Recycle `el` in place with new content, as virtualized feeds do."""
        removed = list(el.contents)
        el.clear()
        nodes = _parse_fragment(html)
        for node in nodes:
            el.append(node)
        self._notify([MutationRecord("childList", el, added_nodes=nodes, removed_nodes=removed)])
        return [n for n in nodes if isinstance(n, Tag)]

    def navigate(self, url: str, html: str | None = None) -> None:
        """Client-side navigation: the URL changes without a reload.

        When `html` is given the body content is swapped for it.
        """
        logger.debug("navigate %s -> %s", self.url, url)
        self.url = url
        if html is not None:
            self.replace_children(self.body, html)
