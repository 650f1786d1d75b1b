"""
Relocation of a stored SelectionRecord back into a live selection.

Algorithm:
1. Find the first element matching the stored selector whose squished text
   contains ``before + phrase + after``
2. Follow the anchor and focus positional paths down from that element
3. Scroll the anchor's element into view
4. Rebuild both points, descending into the original text node if needed
5. Verify the reconstructed text equals the stored phrase before selecting it
"""

from __future__ import annotations

from cssselect import SelectorError
from lxml import etree

from textanchor.dom import (
    ElementPoint,
    HtmlDocument,
    Point,
    TextNode,
    TextPoint,
    child_nodes,
    text_content,
)
from textanchor.logging_config import logger
from textanchor.models import (
    RelocationResult,
    RelocationStatus,
    SelectionRecord,
    TrimmedPoint,
)
from textanchor.selectors.structure import resolve_structural_path
from textanchor.strings import squish


def rebuild_point(element: etree._Element, point: TrimmedPoint) -> Point | None:
    """Turn a trimmed point into a live point inside ``element``.

    Returns:
        The point, or None if the element no longer has the expected shape
    """
    nodes = child_nodes(element)
    if point.parent_offset is None:
        if not 0 <= point.offset <= len(nodes):
            return None
        return ElementPoint(element, point.offset)

    if not 0 <= point.parent_offset < len(nodes):
        return None
    node = nodes[point.parent_offset]
    if not isinstance(node, TextNode) or not 0 <= point.offset <= len(node.data):
        return None
    return TextPoint(node, point.offset)


class SelectionResolver:
    """Finds stored selections in one document and selects them."""

    def __init__(self, document: HtmlDocument) -> None:
        self.document = document

    def find_selection(self, record: SelectionRecord) -> etree._Element | None:
        """Return the first element matching the record's selector and context."""
        context = record.context
        try:
            candidates = self.document.find_all(record.selection.path)
        except SelectorError as e:
            logger.warning(f"Stored selector {record.selection.path!r} is invalid: {e}")
            return None
        for element in candidates:
            if context in squish(text_content(element)):
                return element
        return None

    def relocate(self, record: SelectionRecord) -> RelocationResult:
        """Find the record's selection and make it the live selection.

        The live selection is only replaced when the rebuilt range's text
        equals the stored phrase.
        """
        candidate = self.find_selection(record)
        if candidate is None:
            logger.warning(f"No element under {record.selection.path} contains {record.phrase!r}")
            return RelocationResult(status=RelocationStatus.NO_MATCH)

        anchor, focus = record.selection.anchor, record.selection.focus
        if anchor is None or focus is None:
            logger.warning("Record has no anchor or focus point")
            return RelocationResult(status=RelocationStatus.MISSING_POINT)

        anchor_element = resolve_structural_path(candidate, anchor.path)
        focus_element = resolve_structural_path(candidate, focus.path)
        if anchor_element is None or focus_element is None:
            logger.warning(f"Point paths no longer resolve under <{candidate.tag}>")
            return RelocationResult(status=RelocationStatus.MISSING_POINT)

        self.document.scroll_into_view(anchor_element)

        anchor_point = rebuild_point(anchor_element, anchor)
        focus_point = rebuild_point(focus_element, focus)
        if anchor_point is None or focus_point is None:
            logger.warning("Point offsets no longer fit the document")
            return RelocationResult(status=RelocationStatus.MISSING_POINT)

        found = squish(self.document.create_range(anchor_point, focus_point).to_string())
        if found != record.phrase:
            logger.warning(f"Expected {record.phrase!r} but the range holds {found!r}")
            return RelocationResult(
                status=RelocationStatus.INTEGRITY_MISMATCH, found_text=found
            )

        self.document.select(anchor_point, focus_point)
        logger.info(f"Selected {found!r}")
        return RelocationResult(status=RelocationStatus.SELECTED, found_text=found)

    def highlight_selection(self, record: SelectionRecord) -> bool:
        """Relocate and select the record, reporting only success or failure."""
        return self.relocate(record).selected


def find_selection(
    document: HtmlDocument, record: SelectionRecord
) -> etree._Element | None:
    """Find the element holding a stored selection."""
    return SelectionResolver(document).find_selection(record)


def highlight_selection(document: HtmlDocument, record: SelectionRecord) -> bool:
    """Relocate a stored selection and make it the live selection."""
    return SelectionResolver(document).highlight_selection(record)
