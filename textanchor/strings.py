"""A repository of string-related functions."""

from __future__ import annotations

import re
from typing import Iterable, TypeVar

T = TypeVar("T")

_WHITESPACE = re.compile(r"\s+")

# Characters that carry meaning in a regular expression
_REGEX_SPECIALS = set(".[]{}^$+?*()\\|")


def squish(text: str | None) -> str:
    """Strip and condense whitespace.

    Leading and trailing whitespace is removed and every interior run of
    whitespace becomes a single space.
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.strip())


def wsrx(text: str) -> str | None:
    """Create a pattern matching ``text`` where a space matches any whitespace run.

    All other characters match literally.
    """
    if not text:
        return None
    chars: list[str] = []
    for c in text:
        if c in _REGEX_SPECIALS:
            chars.append("\\" + c)
        elif c == " ":
            chars.append(r"\s+")
        else:
            chars.append(c)
    return "".join(chars)


def uniq(things: Iterable[T]) -> list[T]:
    """Deduplicate preserving first-seen order."""
    seen: set[T] = set()
    result: list[T] = []
    for t in things:
        if t in seen:
            continue
        seen.add(t)
        result.append(t)
    return result
