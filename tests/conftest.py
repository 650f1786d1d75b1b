"""
Pytest configuration and fixtures for textanchor tests
"""
import pytest

from textanchor.dom import HtmlDocument, TextPoint, child_nodes
from textanchor.logging_config import GlobalIndent

HELLO_MARKUP = '<div id="x"><p class="a b">Hello <b>world</b>!</p></div>'


@pytest.fixture(autouse=True)
def reset_indent():
    """Keep log indentation from leaking between tests"""
    GlobalIndent.reset()
    yield
    GlobalIndent.reset()


@pytest.fixture
def hello_doc() -> HtmlDocument:
    """The 'Hello world!' document"""
    return HtmlDocument.from_string(HELLO_MARKUP, url="https://example.com/hello")


@pytest.fixture
def select_phrase():
    """Factory fixture selecting the first occurrence of a phrase.

    Usage:
        def test_example(hello_doc, select_phrase):
            select_phrase(hello_doc, "world")
            # hello_doc.selection.to_string() == "world"
    """

    def _select(document: HtmlDocument, phrase: str, backwards: bool = False):
        found = document.find_text(phrase)
        assert found is not None, f"{phrase!r} not in document"
        if backwards:
            return document.select(found.focus, found.anchor)
        return document.select(found.anchor, found.focus)

    return _select


@pytest.fixture
def select_around_bold(hello_doc):
    """Select 'world' from the end of 'Hello ' to the start of '!'.

    Both points sit in text nodes of the <p>, so the <p> is the common ancestor.
    """
    p = hello_doc.find_all("p")[0]
    nodes = child_nodes(p)
    return hello_doc.select(TextPoint(nodes[0], 6), TextPoint(nodes[2], 0))
