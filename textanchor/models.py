"""
Portable records describing a captured selection.

A SelectionRecord is created once per capture and never mutated afterwards;
the persistence layer stores it verbatim as JSON or YAML.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Self

import yaml
from pydantic import BaseModel, ConfigDict, computed_field


class TrimmedPoint(BaseModel):
    """
    An anchor or focus point relative to the selection's common ancestor.

    Attributes:
        path: Positional ``:nth-child`` path from the common ancestor to the
            element holding the point; empty when it is the ancestor itself
        offset: Character offset inside the text node, or child index when
            the point is not inside a text node
        parent_offset: Index of the text node among its parent's child nodes;
            None when the point is not inside a text node
    """

    model_config = ConfigDict(frozen=True)

    path: str = ""
    offset: int
    parent_offset: int | None = None


class SelectionPath(BaseModel):
    """
    Where a selection lives in the document.

    Attributes:
        path: Selector expression for the common ancestor of anchor and focus
        anchor: Where the selection starts
        focus: Where the selection ends
    """

    model_config = ConfigDict(frozen=True)

    path: str
    anchor: TrimmedPoint | None = None
    focus: TrimmedPoint | None = None


class SelectionRecord(BaseModel):
    """
    A captured selection with enough context to find it again.

    ``before + phrase + after`` is the whitespace-squished text of the
    common ancestor at capture time.

    Attributes:
        phrase: The selected text, squished
        before: Text of the common ancestor preceding the phrase
        after: Text of the common ancestor following the phrase
        selection: Addressing information for the common ancestor and points
        url: URL of the page the selection was captured on
        title: Title of that page
        when: Capture time
    """

    model_config = ConfigDict(frozen=True)

    phrase: str
    before: str = ""
    after: str = ""
    selection: SelectionPath
    url: str | None = None
    title: str | None = None
    when: datetime | None = None

    @property
    def context(self) -> str:
        """The full squished text of the common ancestor."""
        return f"{self.before}{self.phrase}{self.after}"

    def to_yaml(self) -> str:
        """Serialize to YAML for storage."""
        return yaml.safe_dump(
            self.model_dump(mode="json", exclude_none=True),
            allow_unicode=True,
            sort_keys=False,
        )

    @classmethod
    def from_yaml(cls, yaml_text: str) -> Self:
        """
        Load a record from YAML.

        Example:
            record = SelectionRecord.from_yaml('''
                phrase: world
                before: "Hello "
                after: "!"
                selection:
                  path: p.a
                  anchor: {path: ":nth-child(1)", offset: 0, parent_offset: 0}
                  focus: {path: ":nth-child(1)", offset: 5, parent_offset: 0}
            ''')
        """
        data = yaml.safe_load(yaml_text) or {}
        return cls.model_validate(data)


class RelocationStatus(str, Enum):
    """Outcome of an attempt to relocate a stored selection."""

    SELECTED = "selected"
    NO_MATCH = "no_match"
    INTEGRITY_MISMATCH = "integrity_mismatch"
    MISSING_POINT = "missing_point"


class RelocationResult(BaseModel):
    """
    Result of relocating a SelectionRecord.

    Use the boolean properties for clean result handling:

        result = resolver.relocate(record)
        if result.selected:
            ...
        elif result.integrity_mismatch:
            print(f"Found {result.found_text!r} instead")

    Attributes:
        status: What happened
        found_text: Squished text of the reconstructed range, when one was built
    """

    status: RelocationStatus
    found_text: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def selected(self) -> bool:
        """True if the selection was found, verified and made live."""
        return self.status == RelocationStatus.SELECTED

    @computed_field  # type: ignore[prop-decorator]
    @property
    def no_match(self) -> bool:
        """True if no element matched the stored selector and context."""
        return self.status == RelocationStatus.NO_MATCH

    @computed_field  # type: ignore[prop-decorator]
    @property
    def integrity_mismatch(self) -> bool:
        """True if the reconstructed text differed from the stored phrase."""
        return self.status == RelocationStatus.INTEGRITY_MISMATCH

    @computed_field  # type: ignore[prop-decorator]
    @property
    def missing_point(self) -> bool:
        """True if an anchor or focus point could not be rebuilt."""
        return self.status == RelocationStatus.MISSING_POINT
