"""Tests for request dispatch in ContentHandler."""

import pytest

from textanchor.dom import HtmlDocument
from textanchor.messaging import ContentHandler, UnknownActionError


@pytest.fixture
def handler(hello_doc) -> ContentHandler:
    return ContentHandler(hello_doc)


def _stored(url: str = "https://example.com/hello", **overrides) -> dict:
    selection = {
        "phrase": "world",
        "before": "Hello ",
        "after": "!",
        "selection": {
            "path": "p",
            "anchor": {"path": "", "offset": 6, "parent_offset": 0},
            "focus": {"path": "", "offset": 0, "parent_offset": 2},
        },
        "url": url,
    }
    selection.update(overrides)
    return selection


class TestGetSelection:
    """Tests for the getSelection action."""

    def test_no_selection(self, handler) -> None:
        assert handler.handle({"action": "getSelection"}) == {"action": "noSelection"}

    def test_selection_is_stamped(self, handler, select_around_bold) -> None:
        response = handler.handle({"action": "getSelection"})

        assert response["action"] == "selection"
        selection = response["selection"]
        assert selection["phrase"] == "world"
        assert selection["before"] == "Hello "
        assert selection["url"] == "https://example.com/hello"
        assert selection["title"] is None
        assert selection["when"]

    def test_page_title_is_included(self, select_phrase) -> None:
        doc = HtmlDocument.from_string(
            "<html><head><title> My  page </title></head><body><p>Hi there</p></body></html>"
        )
        select_phrase(doc, "there")

        response = ContentHandler(doc).handle({"action": "getSelection"})

        assert response["selection"]["title"] == "My page"


class TestSelect:
    """Tests for the select action."""

    def test_round_trip_through_messages(self, handler, hello_doc, select_around_bold) -> None:
        stored = handler.handle({"action": "getSelection"})["selection"]
        hello_doc.clear_selection()

        response = handler.handle({"action": "select", "selection": stored})

        assert response == {
            "action": "highlight",
            "highlights": {"matches": 1, "preservedContext": True, "status": "selected"},
        }
        assert hello_doc.selection.to_string() == "world"

    def test_fragment_differences_stay_on_page(self, handler) -> None:
        stored = _stored(url="https://example.com/hello#section")

        response = handler.handle({"action": "select", "selection": stored})

        assert response["action"] == "highlight"
        assert response["highlights"]["matches"] == 1

    def test_other_page_navigates(self, handler, hello_doc) -> None:
        stored = _stored(url="https://example.com/other")

        response = handler.handle({"action": "select", "selection": stored})

        assert response["action"] == "goto"
        assert response["url"].startswith("https://example.com/other#:~:text=")
        assert hello_doc.selection is None

    def test_lost_context(self, handler) -> None:
        stored = _stored(before="Goodbye ")

        response = handler.handle({"action": "select", "selection": stored})

        assert response["highlights"] == {
            "matches": 0,
            "preservedContext": False,
            "status": "no_match",
        }

    def test_integrity_mismatch_keeps_context(self, handler) -> None:
        stored = _stored()
        stored["selection"]["anchor"]["offset"] = 2

        response = handler.handle({"action": "select", "selection": stored})

        assert response["highlights"] == {
            "matches": 0,
            "preservedContext": True,
            "status": "integrity_mismatch",
        }

    def test_invalid_payload(self, handler) -> None:
        response = handler.handle({"action": "select", "selection": {"phrase": "world"}})

        assert response["action"] == "error"
        assert "invalid selection" in response["message"]

    def test_invalid_structural_path(self, handler) -> None:
        stored = _stored()
        stored["selection"]["anchor"]["path"] = "div > p"

        response = handler.handle({"action": "select", "selection": stored})

        assert response["action"] == "error"
        assert "div > p" in response["message"]


class TestGoto:
    """Tests for the goto action."""

    def test_goto(self, handler) -> None:
        response = handler.handle({"action": "goto", "selection": _stored()})

        assert response == {
            "action": "goto",
            "url": "https://example.com/hello#:~:text=Hello-,world,-!",
        }

    def test_goto_without_url(self, handler) -> None:
        response = handler.handle({"action": "goto", "selection": _stored(url=None)})

        assert response == {"action": "error", "message": "received no URL"}


def test_unknown_action(handler) -> None:
    with pytest.raises(UnknownActionError) as exc_info:
        handler.handle({"action": "explode"})

    assert exc_info.value.action == "explode"
