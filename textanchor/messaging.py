"""
Request dispatch between the messaging layer and the capture/relocate core.

Requests and responses are plain dicts keyed by ``action``:

    handler = ContentHandler(document)
    handler.handle({"action": "getSelection"})
    # {"action": "selection", "selection": {...}} or {"action": "noSelection"}
    handler.handle({"action": "select", "selection": record_json})
    # {"action": "highlight", "highlights": {...}} or {"action": "goto", "url": ...}
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from pydantic import ValidationError

from textanchor.capture import SelectionCapturer
from textanchor.dom import HtmlDocument
from textanchor.fragments import magic_url
from textanchor.logging_config import logger
from textanchor.models import SelectionRecord
from textanchor.relocate import SelectionResolver
from textanchor.selectors.structure import InvalidStructuralPathError

Message = dict[str, Any]


class UnknownActionError(Exception):
    """Raised when a request carries an action this handler does not know."""

    def __init__(self, action: object) -> None:
        self.action = action
        super().__init__(f"Unexpected request action: {action!r}")


def _without_fragment(url: str) -> str:
    return urlunsplit(urlsplit(url)._replace(fragment=""))


def _error(message: str) -> Message:
    return {"action": "error", "message": message}


class ContentHandler:
    """Answers capture and relocation requests for one document."""

    def __init__(self, document: HtmlDocument) -> None:
        self.document = document

    def handle(self, request: Message) -> Message:
        """Dispatch a request to the matching operation.

        Raises:
            UnknownActionError: If the action is not recognized
        """
        action = request.get("action")
        if action == "getSelection":
            return self._get_selection()
        if action == "select":
            return self._select(request)
        if action == "goto":
            return self._goto(request)
        raise UnknownActionError(action)

    def _get_selection(self) -> Message:
        record = SelectionCapturer(self.document).wrap_selection()
        if record is None:
            return {"action": "noSelection"}
        record = record.model_copy(
            update={
                "url": self.document.url,
                "title": self.document.title,
                "when": datetime.now(timezone.utc),
            }
        )
        return {"action": "selection", "selection": record.model_dump(mode="json")}

    def _select(self, request: Message) -> Message:
        try:
            record = SelectionRecord.model_validate(request.get("selection"))
        except ValidationError as e:
            return _error(f"invalid selection: {e.error_count()} validation error(s)")

        if self._elsewhere(record):
            logger.info(f"Selection belongs to {record.url}, navigating")
            return {"action": "goto", "url": magic_url(record)}

        try:
            result = SelectionResolver(self.document).relocate(record)
        except InvalidStructuralPathError as e:
            return _error(str(e))

        return {
            "action": "highlight",
            "highlights": {
                "matches": 1 if result.selected else 0,
                "preservedContext": not result.no_match,
                "status": result.status.value,
            },
        }

    def _goto(self, request: Message) -> Message:
        try:
            record = SelectionRecord.model_validate(request.get("selection"))
        except ValidationError as e:
            return _error(f"invalid selection: {e.error_count()} validation error(s)")
        url = magic_url(record)
        if url is None:
            return _error("received no URL")
        return {"action": "goto", "url": url}

    def _elsewhere(self, record: SelectionRecord) -> bool:
        """True if the record was captured on a different page than this one."""
        if not record.url or not self.document.url:
            return False
        return _without_fragment(record.url) != _without_fragment(self.document.url)
