"""Resolution of reference paths against their source tree anchors."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath
from typing import Optional

from .graph import ObjectGraph, RawObject

GROUP_RELATIVE = "<group>"
ABSOLUTE = "<absolute>"
SOURCE_ROOT = "SOURCE_ROOT"

# anchors whose base directory is only known at build time
UNRESOLVABLE_SOURCE_TREES = frozenset({"", "SDKROOT", "DEVELOPER_DIR", "BUILT_PRODUCTS_DIR"})
VERBATIM_SOURCE_TREES = frozenset({SOURCE_ROOT, ABSOLUTE})


class UnknownSourceTreeError(ValueError):
    """Raised for a source tree anchor outside the set this resolver understands."""

    def __init__(self, source_tree: str, identifier: str) -> None:
        super().__init__(f"unknown source tree '{source_tree}' on object {identifier}")
        self.source_tree = source_tree
        self.identifier = identifier


def assemble_path(obj: RawObject, graph: ObjectGraph) -> Optional[str]:
    """Return the anchored path string for ``obj``, or None when it cannot be resolved.

    Group-relative paths are prefixed with the path of every group-relative
    ancestor that declares one. Ascending stops at the first ancestor with any
    other anchor; a source root or absolute ancestor still contributes its path.
    Only the object's own anchor can make it unresolvable or invalid.
    """
    path = obj.string("path")
    source_tree = obj.string("sourceTree")
    if not path or source_tree is None:
        return None
    if source_tree in UNRESOLVABLE_SOURCE_TREES:
        return None
    if source_tree in VERBATIM_SOURCE_TREES:
        return path
    if source_tree != GROUP_RELATIVE:
        raise UnknownSourceTreeError(source_tree, obj.id)

    for ancestor in graph.ancestors(obj.id):
        ancestor_path = ancestor.string("path")
        ancestor_tree = ancestor.string("sourceTree")
        if ancestor_tree in VERBATIM_SOURCE_TREES:
            if ancestor_path:
                path = f"{ancestor_path}/{path}"
            break
        if ancestor_tree != GROUP_RELATIVE:
            break
        if ancestor_path:
            path = f"{ancestor_path}/{path}"
    return path


def resolve_path(path: str, root: Path) -> Path:
    """Anchor ``path`` at ``root`` unless it is already absolute."""
    if os.path.isabs(path):
        return Path(os.path.normpath(path))
    return Path(os.path.normpath(root / path))


def display_path(url: Path, root: Path) -> str:
    """Return ``url`` relative to ``root`` when it lives beneath it."""
    try:
        return PurePosixPath(url.relative_to(root)).as_posix()
    except ValueError:
        return url.as_posix()


def hierarchy_path(obj: RawObject, graph: ObjectGraph) -> str:
    """Return the path of ``obj`` as shown in the visual group hierarchy."""
    names = [label for label in (_label(obj),) if label]
    for ancestor in graph.ancestors(obj.id):
        label = _label(ancestor)
        if label:
            names.append(label)
    return "/".join(reversed(names))


def _label(obj: RawObject) -> str:
    return obj.string("name") or obj.string("path") or ""


__all__ = [
    "ABSOLUTE",
    "GROUP_RELATIVE",
    "SOURCE_ROOT",
    "UNRESOLVABLE_SOURCE_TREES",
    "UnknownSourceTreeError",
    "assemble_path",
    "display_path",
    "hierarchy_path",
    "resolve_path",
]
