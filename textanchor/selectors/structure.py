"""Common ancestors and purely positional paths between nodes."""

from __future__ import annotations

import re

from lxml import etree

from textanchor.dom import Node, element_children, parent_of

_STEP = re.compile(r"^:nth-child\((\d+)\)$")
STEP_SEPARATOR = " > "


class InvalidStructuralPathError(Exception):
    """Raised when a positional path contains something other than nth-child steps."""

    def __init__(self, path: str, step: str) -> None:
        """Initialize the error.

        Args:
            path: The full path being resolved
            step: The offending step
        """
        self.path = path
        self.step = step
        super().__init__(f"Invalid step {step!r} in structural path {path!r}")


def ancestors(node: Node) -> list[Node]:
    """Return the chain from the root element down to ``node`` (inclusive)."""
    chain = [node]
    parent = parent_of(node)
    while parent is not None:
        chain.insert(0, parent)
        parent = parent.getparent()
    return chain


def common_parent(a: Node, b: Node) -> Node:
    """Return the deepest node containing both ``a`` and ``b``.

    Raises:
        ValueError: If the nodes belong to different trees
    """
    if a is b or a == b:
        return a
    a_chain, b_chain = ancestors(a), ancestors(b)
    if a_chain[0] is not b_chain[0]:
        raise ValueError("Nodes belong to different documents")

    # the root element is shared by construction
    i = 1
    while i < len(a_chain) and i < len(b_chain) and a_chain[i] == b_chain[i]:
        i += 1
    return a_chain[i - 1]


def absolute_path(ancestor: etree._Element, descendant: etree._Element) -> str:
    """Return the ``:nth-child`` path leading from ``ancestor`` to ``descendant``.

    The path is empty when both are the same element.

    Raises:
        ValueError: If ``descendant`` is not inside ``ancestor``
    """
    steps: list[str] = []
    node = descendant
    while node is not ancestor:
        parent = node.getparent()
        if parent is None:
            raise ValueError(f"<{descendant.tag}> is not inside <{ancestor.tag}>")
        position = next(
            i for i, child in enumerate(element_children(parent), 1) if child is node
        )
        steps.insert(0, f":nth-child({position})")
        node = parent
    return STEP_SEPARATOR.join(steps)


def resolve_structural_path(
    ancestor: etree._Element, path: str
) -> etree._Element | None:
    """Follow an ``absolute_path`` back down from ``ancestor``.

    Returns:
        The addressed element, or None if the tree no longer has that shape

    Raises:
        InvalidStructuralPathError: If the path is not made of nth-child steps
    """
    node = ancestor
    if not path:
        return node
    for step in path.split(STEP_SEPARATOR):
        match = _STEP.match(step.strip())
        if match is None:
            raise InvalidStructuralPathError(path, step)
        position = int(match.group(1))
        children = element_children(node)
        if not 1 <= position <= len(children):
            return None
        node = children[position - 1]
    return node
