"""
Text fragment URLs for stored selections.

A text fragment (``#:~:text=...``) makes the browser scroll to and highlight
the cited phrase when the URL is opened, without needing the selector path.
"""

from __future__ import annotations

from urllib.parse import quote, urlsplit, urlunsplit

from textanchor.config import FRAGMENT_CONTEXT_WORDS, TEXT_FRAGMENT_DIRECTIVE, URL_BUDGET
from textanchor.models import SelectionRecord
from textanchor.strings import squish


def _enc(text: str) -> str:
    # hyphens delimit context in the directive, so they must be encoded too
    return quote(text, safe="!*'()").replace("-", "%2D")


def text_fragment(record: SelectionRecord, budget: int) -> str | None:
    """Build a text fragment directive for ``record`` no longer than ``budget``.

    Context is cut down to a couple of words on each side to tolerate edits.
    While the directive is too long, context is shortened first; without
    context the phrase is cited as a start and an end half, both shortened
    from the middle.

    Returns:
        The directive, or None if nothing useful fits the budget
    """
    if budget < 1:
        return None

    before = " ".join(squish(record.before).split(" ")[-FRAGMENT_CONTEXT_WORDS:])
    after = " ".join(squish(record.after).split(" ")[:FRAGMENT_CONTEXT_WORDS])
    phrase = record.phrase
    half = len(phrase) // 2
    beginning, end = phrase[:half], phrase[half:]

    while True:
        prefix = f"{_enc(before)}-," if before else ""
        suffix = f",-{_enc(after)}" if after else ""
        if prefix or suffix:
            fragment = f"{TEXT_FRAGMENT_DIRECTIVE}{prefix}{_enc(phrase)}{suffix}"
        else:
            fragment = f"{TEXT_FRAGMENT_DIRECTIVE}{_enc(beginning)},{_enc(end)}"

        if len(fragment) <= budget:
            return fragment

        if prefix or suffix:
            after = after[:-1]
            before = before[1:]
        else:
            beginning = beginning[:-1]
            end = end[1:]
            if not beginning or not end:
                return None


def magic_url(record: SelectionRecord) -> str | None:
    """Return a URL that highlights the record's phrase and scrolls to it.

    Returns:
        The record's URL with a text fragment, the bare record URL when no
        fragment fits, or None when the record has no URL
    """
    if not record.url:
        return None
    bare = urlunsplit(urlsplit(record.url)._replace(fragment=""))
    # one character goes to the "#"
    fragment = text_fragment(record, URL_BUDGET - len(bare) - 1)
    if fragment:
        return f"{bare}#{fragment}"
    return record.url
