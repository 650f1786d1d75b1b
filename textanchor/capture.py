"""Capture of the live selection into a portable SelectionRecord."""

from __future__ import annotations

from dataclasses import dataclass

from lxml import etree

from textanchor.dom import ElementPoint, HtmlDocument, Point, TextPoint, child_index, text_content
from textanchor.logging_config import logger
from textanchor.models import SelectionPath, SelectionRecord, TrimmedPoint
from textanchor.selectors.resolver import PathResolver, SelectorCache
from textanchor.selectors.structure import absolute_path, common_parent
from textanchor.strings import squish


@dataclass(frozen=True)
class PointDescription:
    """A selection point together with the element that contains it."""

    container: etree._Element
    offset: int
    parent_offset: int | None = None

    def trim(self, ancestor: etree._Element) -> TrimmedPoint:
        return TrimmedPoint(
            path=absolute_path(ancestor, self.container),
            offset=self.offset,
            parent_offset=self.parent_offset,
        )


def describe_point(point: Point) -> PointDescription:
    """Describe a point by its containing element.

    A point inside a text node is described by the text node's parent and the
    text node's index among the parent's child nodes.
    """
    if isinstance(point, TextPoint):
        return PointDescription(
            container=point.node.parent,
            offset=point.offset,
            parent_offset=child_index(point.node),
        )
    if isinstance(point, ElementPoint):
        return PointDescription(container=point.node, offset=point.offset)
    raise TypeError(f"point must be a TextPoint or ElementPoint, got {type(point)}")


class SelectionCapturer:
    """Builds SelectionRecords from the live selection of one document.

    Each capturer owns its query cache, so create one per capture request.
    """

    def __init__(
        self, document: HtmlDocument, cache: SelectorCache | None = None
    ) -> None:
        self.document = document
        self.cache = cache or SelectorCache(document)
        self.resolver = PathResolver(document, self.cache)

    def wrap_selection(self) -> SelectionRecord | None:
        """Extract the useful information out of the live selection.

        Returns:
            The record, or None when the selection is collapsed or contains
            only whitespace
        """
        selection = self.document.selection
        if selection is None or selection.is_collapsed:
            logger.debug("Nothing selected")
            return None

        phrase = squish(selection.to_string())
        if not phrase:
            logger.debug("Selection is whitespace only")
            return None

        anchor = describe_point(selection.anchor)
        focus = describe_point(selection.focus)
        parent = common_parent(anchor.container, focus.container)

        # The first occurrence is used when the phrase repeats inside the context
        context = squish(text_content(parent))
        i = context.find(phrase)
        if i == -1:
            logger.warning(f"Phrase {phrase!r} not found in the text of <{parent.tag}>")
            return None
        before, after = context[:i], context[i + len(phrase) :]

        with logger.indent_block(f"Resolving selector for <{parent.tag}>"):
            path = self.resolver.simplest_path(parent)

        logger.info(f"Captured {phrase!r} under {path}")
        return SelectionRecord(
            phrase=phrase,
            before=before,
            after=after,
            selection=SelectionPath(
                path=path,
                anchor=anchor.trim(parent),
                focus=focus.trim(parent),
            ),
        )


def wrap_selection(document: HtmlDocument) -> SelectionRecord | None:
    """Capture the live selection of ``document`` with a fresh capturer."""
    return SelectionCapturer(document).wrap_selection()
