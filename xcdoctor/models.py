"""Typed records derived from a project's object graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

# a mapping of declared file kinds to their common extensions; files matching
# these are treated as source and become subject to full-text search when
# looking for unused resources, so bulky assets (images, video) must not be listed
SOURCE_TYPES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("file.storyboard", ("storyboard",)),
    ("file.xib", ("xib", "nib")),
    ("folder.assetcatalog", ("xcassets",)),
    ("text.plist.strings", ("strings",)),
    ("text.plist.xml", ("plist",)),
    ("sourcecode.c.c", ("c",)),
    ("sourcecode.c.h", ("h", "pch")),
    ("sourcecode.c.objc", ("m",)),
    ("sourcecode.cpp.objcpp", ("mm",)),
    ("sourcecode.cpp.cpp", ("cpp", "cc")),
    ("sourcecode.cpp.h", ("h", "hh")),
    ("sourcecode.swift", ("swift",)),
    ("sourcecode.metal", ("metal", "mtl")),
    ("text.script.sh", ("sh",)),
)

HEADER_EXTENSIONS = frozenset({"h", "hh", "pch"})
PROPERTY_LIST_KIND = "text.plist.xml"
ASSET_CATALOG_KIND = "folder.assetcatalog"


def extension_of(path: Path) -> str:
    return path.suffix[1:] if path.suffix else ""


@dataclass(frozen=True)
class FileReference:
    """A file in the project with its resolved location on disk."""

    id: str
    url: Path
    path: str
    kind: Optional[str] = None
    has_target_membership: bool = False

    @property
    def extension(self) -> str:
        return extension_of(self.url)

    @property
    def is_source_file(self) -> bool:
        return any(
            self.kind == file_type or self.extension in extensions
            for file_type, extensions in SOURCE_TYPES
        )

    @property
    def is_header_file(self) -> bool:
        return self.extension in HEADER_EXTENSIONS

    @property
    def is_property_list(self) -> bool:
        return self.kind == PROPERTY_LIST_KIND or self.extension == "plist"

    @property
    def is_asset_catalog(self) -> bool:
        return self.kind == ASSET_CATALOG_KIND or self.extension == "xcassets"


@dataclass(frozen=True)
class GroupReference:
    """A container node of the visual file hierarchy."""

    id: str
    name: str
    display_path: str
    directory: Optional[Path] = None
    path: Optional[str] = None
    has_children: bool = False


@dataclass(frozen=True)
class ProductReference:
    """A native build target."""

    id: str
    name: str
    builds_at_least_one_source: bool = False


@dataclass(frozen=True)
class Resource:
    """A candidate for the unused resource search.

    ``name_variants`` holds every spelling the resource may be referred to by
    in source: its base name, its file name, both without scale suffixes and,
    for fonts, the names embedded in the font itself.
    """

    url: Path
    path: str
    name: str
    file_name: str
    name_variants: FrozenSet[str] = field(default_factory=frozenset)


__all__ = [
    "ASSET_CATALOG_KIND",
    "FileReference",
    "GroupReference",
    "HEADER_EXTENSIONS",
    "PROPERTY_LIST_KIND",
    "ProductReference",
    "Resource",
    "SOURCE_TYPES",
    "extension_of",
]
