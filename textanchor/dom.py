"""
Document tree host built on lxml.html.

lxml keeps character data in the ``text`` and ``tail`` slots of elements
instead of in separate nodes. This module exposes that data as explicit
``TextNode`` values so that the rest of the package can address text the way
a browser does: by child index inside a parent and by character offset inside
a text node.

Example:
    doc = HtmlDocument.from_string('<p class="a">Hello <b>world</b>!</p>')
    selection = doc.find_text("world")
    doc.select(selection.anchor, selection.focus)
    assert doc.selection.to_string() == "world"
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Union

from lxml import etree, html
from lxml.cssselect import CSSSelector

from textanchor.config import SCROLL_BEHAVIOR, SCROLL_BLOCK, validate_url
from textanchor.logging_config import logger
from textanchor.strings import squish, wsrx

if TYPE_CHECKING:
    from lxml.html import HtmlElement


class TextSlot(str, Enum):
    """Where an lxml element stores a run of character data."""

    TEXT = "text"
    TAIL = "tail"


class TextNode:
    """A run of character data stored on an lxml element.

    ``TEXT`` nodes hold ``owner.text`` and live inside ``owner``; ``TAIL``
    nodes hold ``owner.tail`` and follow ``owner`` inside its parent.
    """

    __slots__ = ("owner", "slot")

    def __init__(self, owner: etree._Element, slot: TextSlot) -> None:
        self.owner = owner
        self.slot = slot

    @property
    def data(self) -> str:
        value = self.owner.text if self.slot == TextSlot.TEXT else self.owner.tail
        return value or ""

    @property
    def parent(self) -> etree._Element | None:
        if self.slot == TextSlot.TEXT:
            return self.owner
        return self.owner.getparent()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextNode):
            return NotImplemented
        return self.owner is other.owner and self.slot == other.slot

    def __hash__(self) -> int:
        return hash((id(self.owner), self.slot))

    def __repr__(self) -> str:
        return f"TextNode({self.data!r})"


Node = Union[TextNode, etree._Element]


class OffsetOutOfRangeError(ValueError):
    """Raised when a point offset lies outside its node."""

    def __init__(self, offset: int, limit: int) -> None:
        self.offset = offset
        self.limit = limit
        super().__init__(f"Offset {offset} is outside 0..{limit}")


@dataclass(frozen=True)
class TextPoint:
    """A position between two characters of a text node."""

    node: TextNode
    offset: int


@dataclass(frozen=True)
class ElementPoint:
    """A position between two child nodes of an element."""

    node: etree._Element
    offset: int


Point = Union[TextPoint, ElementPoint]


def is_element(node: object) -> bool:
    """True for real elements, False for text, comment and PI nodes."""
    return isinstance(node, etree._Element) and isinstance(node.tag, str)


def parent_of(node: Node) -> etree._Element | None:
    if isinstance(node, TextNode):
        return node.parent
    return node.getparent()


def child_nodes(element: etree._Element) -> list[Node]:
    """Return the DOM-style child list of an element.

    Text runs, child elements and comments are listed in document order.
    """
    nodes: list[Node] = []
    if element.text:
        nodes.append(TextNode(element, TextSlot.TEXT))
    for child in element:
        nodes.append(child)
        if child.tail:
            nodes.append(TextNode(child, TextSlot.TAIL))
    return nodes


def element_children(element: etree._Element) -> list[etree._Element]:
    """Return only the element children, as counted by ``:nth-child``."""
    return [child for child in element if isinstance(child.tag, str)]


def child_index(node: Node) -> int:
    """Return the index of a node among its parent's ``child_nodes``."""
    parent = parent_of(node)
    if parent is None:
        raise ValueError(f"{node!r} has no parent")
    for i, sibling in enumerate(child_nodes(parent)):
        if sibling is node or sibling == node:
            return i
    raise ValueError(f"{node!r} is not a child of its parent")


def iter_text_nodes(node: Node) -> Iterator[TextNode]:
    """Yield the text nodes under ``node`` in document order."""
    if isinstance(node, TextNode):
        yield node
        return
    if not is_element(node):
        return
    if node.text:
        yield TextNode(node, TextSlot.TEXT)
    for child in node:
        yield from iter_text_nodes(child)
        if child.tail:
            yield TextNode(child, TextSlot.TAIL)


def text_content(node: Node) -> str:
    """Return the concatenated character data under ``node``."""
    return "".join(t.data for t in iter_text_nodes(node))


def _walk(element: etree._Element) -> Iterator[Node]:
    yield element
    if element.text:
        yield TextNode(element, TextSlot.TEXT)
    for child in element:
        if isinstance(child.tag, str):
            yield from _walk(child)
        if child.tail:
            yield TextNode(child, TextSlot.TAIL)


@lru_cache(maxsize=1024)
def _compile(expr: str) -> CSSSelector:
    return CSSSelector(expr, translator="html")


@dataclass
class Selection:
    """A user selection: ``anchor`` is where it started, ``focus`` where it ended.

    The focus may precede the anchor when the user selected backwards.
    """

    document: HtmlDocument
    anchor: Point
    focus: Point

    @property
    def is_collapsed(self) -> bool:
        return self.anchor == self.focus

    def to_string(self) -> str:
        return self.document.create_range(self.anchor, self.focus).to_string()


@dataclass(frozen=True)
class TextRange:
    """A contiguous span of document text between two points in document order."""

    document: HtmlDocument
    start: Point
    end: Point
    start_offset: int = field(compare=False)
    end_offset: int = field(compare=False)

    def to_string(self) -> str:
        return self.document.text[self.start_offset : self.end_offset]


class HtmlDocument:
    """An lxml.html document with selection, query and scrolling support.

    Attributes:
        root: The ``<html>`` element
        url: Optional origin URL of the document
        selection: The live selection, None when nothing is selected
        scroll_target: The element last scrolled into view
    """

    def __init__(self, root: HtmlElement, url: str | None = None) -> None:
        if url is not None:
            validate_url(url)
        self.root = root
        self.url = url
        self.selection: Selection | None = None
        self.scroll_target: etree._Element | None = None
        self.scroll_options: dict[str, str] = {}

    @classmethod
    def from_string(cls, markup: str, url: str | None = None) -> HtmlDocument:
        """Parse markup into a full document (``<html>`` and ``<body>`` are implied)."""
        return cls(html.document_fromstring(markup), url=url)

    @classmethod
    def from_file(cls, path: str | Path, url: str | None = None) -> HtmlDocument:
        """Load a document from an HTML file."""
        return cls.from_string(Path(path).read_text(encoding="utf-8"), url=url)

    # === Queries ===

    def find_all(self, expr: str) -> list[etree._Element]:
        """Return the elements matching a selector expression, in document order."""
        return _compile(expr)(self.root)

    def count_matches(self, expr: str) -> int:
        return len(self.find_all(expr))

    def class_count(self, name: str) -> int:
        """Return how many elements carry the class ``name``."""
        return len(self.root.find_class(name))

    def is_topmost(self, element: etree._Element) -> bool:
        return element.getparent() is None

    @property
    def text(self) -> str:
        return text_content(self.root)

    @property
    def title(self) -> str | None:
        """Return the page title.

        Falls back to the og:title and twitter:title meta tags that
        react-helmet style pages render in place of a ``<title>``.
        """
        title = self.root.find(".//title")
        if title is not None and squish(title.text_content()):
            return squish(title.text_content())
        for attr, value in (("property", "og:title"), ("name", "twitter:title")):
            for meta in self.root.iter("meta"):
                if meta.get("data-rh") == "true" and meta.get(attr) == value:
                    content = meta.get("content")
                    if content:
                        return content
        return None

    # === Points and ranges ===

    def _start_offset(self, target: Node) -> int:
        """Return the number of characters preceding ``target``."""
        count = 0
        for node in _walk(self.root):
            if node is target or node == target:
                return count
            if isinstance(node, TextNode):
                count += len(node.data)
        raise ValueError(f"{target!r} is not part of this document")

    def offset_of(self, point: Point) -> int:
        """Return the global character offset of a point in the document text."""
        if isinstance(point, TextPoint):
            limit = len(point.node.data)
            if not 0 <= point.offset <= limit:
                raise OffsetOutOfRangeError(point.offset, limit)
            return self._start_offset(point.node) + point.offset

        nodes = child_nodes(point.node)
        if not 0 <= point.offset <= len(nodes):
            raise OffsetOutOfRangeError(point.offset, len(nodes))
        preceding = sum(len(text_content(n)) for n in nodes[: point.offset])
        return self._start_offset(point.node) + preceding

    def point_at(self, offset: int, end: bool = False) -> TextPoint:
        """Map a global character offset to a point inside a text node.

        At a boundary between two text nodes the point is placed at the start
        of the following node, or at the end of the preceding one when
        ``end`` is set.
        """
        count = 0
        last: TextNode | None = None
        for node in iter_text_nodes(self.root):
            length = len(node.data)
            if end and count < offset <= count + length:
                return TextPoint(node, offset - count)
            if not end and count <= offset < count + length:
                return TextPoint(node, offset - count)
            count += length
            last = node
        if last is not None and offset == count:
            return TextPoint(last, len(last.data))
        raise OffsetOutOfRangeError(offset, count)

    def create_range(self, a: Point, b: Point) -> TextRange:
        """Create a range spanning two points, whichever comes first."""
        a_offset, b_offset = self.offset_of(a), self.offset_of(b)
        if b_offset < a_offset:
            a, b = b, a
            a_offset, b_offset = b_offset, a_offset
        return TextRange(self, a, b, a_offset, b_offset)

    def find_text(self, phrase: str) -> Selection | None:
        """Return a selection spanning the first occurrence of ``phrase``.

        Whitespace in the phrase matches any run of whitespace in the document.
        The live selection is not changed.
        """
        pattern = wsrx(squish(phrase))
        if pattern is None:
            return None
        match = re.search(pattern, self.text)
        if match is None:
            return None
        return Selection(
            self,
            self.point_at(match.start()),
            self.point_at(match.end(), end=True),
        )

    # === Live selection ===

    def select(self, anchor: Point, focus: Point) -> Selection:
        """Replace the live selection."""
        self.selection = Selection(self, anchor, focus)
        return self.selection

    def clear_selection(self) -> None:
        self.selection = None

    def scroll_into_view(
        self,
        element: etree._Element,
        block: str = SCROLL_BLOCK,
        behavior: str = SCROLL_BEHAVIOR,
    ) -> None:
        """Record a request to scroll ``element`` into view."""
        self.scroll_target = element
        self.scroll_options = {"block": block, "behavior": behavior}
        logger.debug(f"Scrolling <{element.tag}> into view ({block}, {behavior})")
