"""Escaping of raw names into the selector expression alphabet."""

import re

_SAFE_CHAR = re.compile(r"[A-Za-z0-9_-]")


def _needs_escape(name: str, i: int) -> bool:
    c = name[i]
    if not _SAFE_CHAR.match(c):
        return True
    if i == 0:
        # An identifier may not start with a digit or be a lone hyphen
        return c.isdigit() or name == "-"
    if i == 1 and name[0] == "-":
        return c.isdigit() or c == "-"
    return False


def escape_name(name: str) -> str:
    """Escape a class or id so it can be embedded in a selector expression.

    Unsafe characters become hexadecimal code-point escapes terminated by a
    space, e.g. ``"a:b"`` becomes ``"a\\3a b"`` and ``"1x"`` becomes
    ``"\\31 x"``. A hyphen after a leading hyphen is escaped too: ``"--x"``
    becomes ``"-\\2d x"``. A terminating space at the very end is dropped.

    Args:
        name: Raw class or id value

    Returns:
        The escaped identifier
    """
    parts: list[str] = []
    for i, c in enumerate(name):
        if _needs_escape(name, i):
            parts.append(f"\\{ord(c):x} ")
        else:
            parts.append(c)
    escaped = "".join(parts)
    if escaped.endswith(" "):
        escaped = escaped[:-1]
    return escaped
