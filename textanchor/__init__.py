"""
textanchor - Capture text selections in HTML documents and find them again.

This library provides:
- Resilient selector generation for the element holding a selection
- Portable SelectionRecords (phrase, context and positional points)
- Relocation of records with an integrity check before selecting

Import patterns:

    # Primary API (recommended)
    from textanchor import HtmlDocument, SelectionCapturer, SelectionResolver

    # Full submodule imports
    from textanchor.selectors import PathResolver, escape_name
    from textanchor.models import SelectionRecord, RelocationStatus

Example usage:

    from textanchor import HtmlDocument, SelectionCapturer, SelectionResolver

    document = HtmlDocument.from_string(markup)
    selection = document.find_text("world")
    document.select(selection.anchor, selection.focus)
    record = SelectionCapturer(document).wrap_selection()

    # later, possibly on a re-rendered copy
    result = SelectionResolver(other_document).relocate(record)
    if result.selected:
        print(other_document.selection.to_string())
"""

__version__ = "0.1.0"

from textanchor.capture import SelectionCapturer, wrap_selection
from textanchor.dom import ElementPoint, HtmlDocument, TextNode, TextPoint
from textanchor.models import (
    RelocationResult,
    RelocationStatus,
    SelectionPath,
    SelectionRecord,
    TrimmedPoint,
)
from textanchor.relocate import SelectionResolver, find_selection, highlight_selection

__all__ = [
    "ElementPoint",
    "HtmlDocument",
    "RelocationResult",
    "RelocationStatus",
    "SelectionCapturer",
    "SelectionPath",
    "SelectionRecord",
    "SelectionResolver",
    "TextNode",
    "TextPoint",
    "TrimmedPoint",
    "find_selection",
    "highlight_selection",
    "wrap_selection",
]
