"""Candidate selector fragments for a single node.

A descriptor addresses a node on its own, without reference to its
ancestors: ``tag``, ``tag#id`` and either of those extended with a subset
of the node's classes.
"""

from __future__ import annotations

import re
from typing import Callable

from lxml import etree

from textanchor.config import MAX_CLASSES
from textanchor.dom import TextNode
from textanchor.selectors.escape import escape_name
from textanchor.strings import uniq

ClassCounter = Callable[[str], int]

# Prefixed tags such as <o:p> cannot be written as a type selector
_PLAIN_TAG = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")


def node_classes(element: etree._Element) -> list[str]:
    """Return the distinct classes of an element in attribute order."""
    return uniq((element.get("class") or "").split())


def optimize_classes(
    classes: list[str],
    class_count: ClassCounter,
    limit: int = MAX_CLASSES,
) -> list[str]:
    """Keep the ``limit`` most distinctive classes, preserving their order.

    Classes are ranked by document-wide frequency, then by length, then
    alphabetically; rare short classes make the best selectors.
    """
    if len(classes) <= limit:
        return list(classes)
    ranked = sorted(classes, key=lambda c: (class_count(c), len(c), c))
    best = set(ranked[:limit])
    return [c for c in classes if c in best]


def class_combinations(classes: list[str]) -> list[str]:
    """Render every subset of ``classes`` as a ``.c1.c2`` suffix.

    The empty subset is included as ``""``; a list of ``k`` distinct classes
    yields ``2**k`` suffixes.
    """
    suffixes = [""]
    for cls in classes:
        suffixes += [f"{suffix}.{cls}" for suffix in suffixes]
    return uniq(suffixes)


def describe(node: etree._Element | TextNode, class_count: ClassCounter) -> list[str]:
    """Return the candidate selector fragments for one node.

    Args:
        node: The element to describe
        class_count: Oracle returning how many elements carry a class

    Returns:
        Distinct fragments, ``tag`` first; prefixed tags are written as ``*``
    """
    if isinstance(node, TextNode):
        return ["#text"]

    tag = node.tag if _PLAIN_TAG.match(node.tag) else "*"
    bases = [tag]
    node_id = node.get("id")
    if node_id:
        bases.append(f"{tag}#{escape_name(node_id)}")

    classes = optimize_classes(node_classes(node), class_count)
    suffixes = class_combinations([escape_name(c) for c in classes])

    return uniq(base + suffix for base in bases for suffix in suffixes)
