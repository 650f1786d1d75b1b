"""Selector generation: escaping, per-node descriptors and path resolution."""

from textanchor.selectors.descriptors import (
    class_combinations,
    describe,
    node_classes,
    optimize_classes,
)
from textanchor.selectors.escape import escape_name
from textanchor.selectors.resolver import PathResolver, ScoredPath, SelectorCache
from textanchor.selectors.structure import (
    InvalidStructuralPathError,
    absolute_path,
    common_parent,
    resolve_structural_path,
)

__all__ = [
    "InvalidStructuralPathError",
    "PathResolver",
    "ScoredPath",
    "SelectorCache",
    "absolute_path",
    "class_combinations",
    "common_parent",
    "describe",
    "escape_name",
    "node_classes",
    "optimize_classes",
    "resolve_structural_path",
]
