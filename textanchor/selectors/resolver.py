"""
Resolution of the simplest sufficiently-unique selector for an element.

The resolver starts from the element's own descriptors and climbs toward the
root only while doing so strictly reduces the number of matching elements.

Example:
    resolver = PathResolver(document)
    path = resolver.simplest_path(element)
    assert element in document.find_all(path)
"""

from __future__ import annotations

from dataclasses import dataclass

from lxml import etree

from textanchor.dom import HtmlDocument
from textanchor.logging_config import logger
from textanchor.selectors.descriptors import describe


@dataclass(frozen=True)
class ScoredPath:
    """A selector expression together with its document-wide match count."""

    selector: str
    matches: int

    def sort_key(self) -> tuple[int, int, str]:
        return (self.matches, len(self.selector), self.selector)


class SelectorCache:
    """Memoized document queries for a single capture or relocation request.

    Holds match counts keyed by selector expression, class frequencies, and
    resolved paths keyed by element. Create a fresh cache per request: none of
    the entries are invalidated when the tree changes.
    """

    def __init__(self, document: HtmlDocument) -> None:
        self.document = document
        self._counts: dict[str, int] = {}
        self._class_counts: dict[str, int] = {}
        self._paths: dict[etree._Element, ScoredPath] = {}

    def count_matches(self, selector: str) -> int:
        if selector not in self._counts:
            self._counts[selector] = self.document.count_matches(selector)
        return self._counts[selector]

    def class_count(self, name: str) -> int:
        if name not in self._class_counts:
            self._class_counts[name] = self.document.class_count(name)
        return self._class_counts[name]

    def cached_path(self, element: etree._Element) -> ScoredPath | None:
        return self._paths.get(element)

    def remember_path(self, element: etree._Element, path: ScoredPath) -> None:
        self._paths[element] = path


class PathResolver:
    """Finds minimal selectors for elements of one document."""

    def __init__(
        self, document: HtmlDocument, cache: SelectorCache | None = None
    ) -> None:
        self.document = document
        self.cache = cache or SelectorCache(document)

    def simplest_path(self, element: etree._Element, suffix: str | None = None) -> str:
        """Return the simplest selector expression addressing ``element``.

        Args:
            element: The element to address
            suffix: Selector for a descendant, appended with a child combinator

        Returns:
            A selector that matches ``element`` (or, with a suffix, the
            descendant), as few other elements as possible
        """
        return self.resolve(element, suffix).selector

    def resolve(
        self, element: etree._Element, suffix: str | None = None
    ) -> ScoredPath:
        """Score and pick the best selector for ``element``.

        Algorithm:
        1. Reuse the memoized result when no suffix is given
        2. Rank the element's descriptors by (match count, length, text)
        3. Stop at the root or when the best descriptor is unique
        4. Otherwise resolve the parent with the best descriptor as suffix,
           and keep the parent-extended path only if it matches fewer elements
        """
        if suffix is None:
            cached = self.cache.cached_path(element)
            if cached is not None:
                return cached

        candidates = describe(element, self.cache.class_count)
        if suffix:
            candidates = [f"{candidate} > {suffix}" for candidate in candidates]

        scored = [
            ScoredPath(candidate, self.cache.count_matches(candidate))
            for candidate in candidates
        ]
        best = min(scored, key=ScoredPath.sort_key)

        if self.document.is_topmost(element) or best.matches == 1:
            chosen = best
        else:
            with logger.indent_block(
                f"{best.selector} matches {best.matches}, trying <{element.getparent().tag}>"
            ):
                parent_path = self.resolve(element.getparent(), best.selector)
            chosen = best if best.matches <= parent_path.matches else parent_path

        logger.debug(f"{chosen.selector} ({chosen.matches} matches)")

        if suffix is None:
            self.cache.remember_path(element, chosen)
        return chosen
