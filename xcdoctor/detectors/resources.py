"""Heuristic detector for resources that no source file mentions.

Every build-member file that is not source code, and every entry of an asset
catalog, is a candidate. Each source file is read (optionally with comments
stripped) and searched for the names a candidate could be referred to by; a
candidate is dropped as soon as one search string matches. Whatever remains
after all sources have been searched is reported.

The search is approximate by nature: names assembled at runtime are missed,
and a coincidental match in an unrelated string hides a truly unused
resource.
"""

from __future__ import annotations

import re
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .base import Detector, ProgressCallback, track
from .utils import (
    format_size,
    iter_asset_directories,
    read_text,
    size_of,
    strip_app_fonts,
    strip_code_comments,
    strip_markup_comments,
)
from ..diagnosis import Defect, Diagnosis, diagnose
from ..fonts import font_names, is_font
from ..logging import get_logger
from ..models import FileReference, Resource
from ..paths import display_path
from ..project import Project

# file kinds and extensions that are never looked up by name from source
EXCLUDED_RESOURCE_KINDS = frozenset(
    {
        "folder.assetcatalog",
        "text.plist.strings",
        "text.plist.stringsdict",
        "wrapper.framework",
        "wrapper.xcframework",
        "archive.ar",
        "compiled.mach-o.dylib",
        "sourcecode.text-based-dylib-definition",
        "text.xcconfig",
    }
)
EXCLUDED_RESOURCE_EXTENSIONS = frozenset(
    {"xcassets", "strings", "stringsdict", "framework", "xcframework", "a", "dylib", "tbd", "xcconfig"}
)

CODE = "code"
MARKUP = "markup"
PROPERTY_LIST = "plist"
STRINGS = "strings"

_MARKUP_EXTENSIONS = frozenset({"storyboard", "xib"})
_SCALE_SUFFIX = re.compile(r"@[1-9]x")

_LOGGER = get_logger("detectors.resources")


def strip_scale(name: str) -> str:
    """Remove scale factor suffixes such as ``@2x`` from a resource name."""
    return _SCALE_SUFFIX.sub("", name)


def name_variants(url: Path) -> Set[str]:
    """Return every name the resource at ``url`` may be referred to by."""
    name = url.stem
    file_name = url.name
    variants = {name, file_name, strip_scale(name), strip_scale(file_name)}
    if is_font(url):
        variants.update(font_names(url))
    return {variant for variant in variants if variant}


def make_resource(url: Path, root: Path) -> Resource:
    return Resource(
        url=url,
        path=display_path(url, root),
        name=url.stem,
        file_name=url.name,
        name_variants=frozenset(name_variants(url)),
    )


def source_flavor(file: FileReference) -> str:
    """Classify a source file by the syntax its references are written in."""
    kind = file.kind or ""
    extension = file.extension
    if kind in ("file.storyboard", "file.xib") or extension in _MARKUP_EXTENSIONS:
        return MARKUP
    if kind == "text.plist.xml" or extension == "plist":
        return PROPERTY_LIST
    if kind == "text.plist.strings" or extension == "strings":
        return STRINGS
    return CODE


def search_strings(flavor: str, variant: str) -> Tuple[str, ...]:
    """Return the literal strings that count as a reference to ``variant``."""
    if flavor == CODE:
        # a string literal, or the last component of a path literal
        return (f'"{variant}"', f'/{variant}"')
    if flavor == MARKUP:
        return (f'"{variant}"', f">{variant}<")
    if flavor == PROPERTY_LIST:
        return (f">{variant}<", f"/{variant}<")
    return (f'"{variant}"',)


def is_referenced(resource: Resource, text: str, flavor: str) -> bool:
    for variant in resource.name_variants:
        if any(candidate in text for candidate in search_strings(flavor, variant)):
            return True
    return False


class UnusedResourcesDetector(Detector):
    """Reports resources whose names appear in no source file.

    Cases are ordered by size, then path, so the largest savings come last.
    """

    defect = Defect.UNUSED_RESOURCES
    preserves_order = True

    def __init__(self, keep_comments: bool = False, ignored_names: Sequence[str] = ()) -> None:
        self.keep_comments = keep_comments
        self.ignored_names = tuple(ignored_names)

    def detect(self, project: Project, progress: ProgressCallback | None = None) -> List[str]:
        return [_case(resource, size) for resource, size in self.find_unused(project, progress)]

    def examine(
        self, project: Project, progress: ProgressCallback | None = None
    ) -> Optional[Diagnosis]:
        unused = self.find_unused(project, progress)
        total = sum(size for _, size in unused)
        return diagnose(
            self.defect,
            [_case(resource, size) for resource, size in unused],
            preserve_order=True,
            detail=f"{format_size(total)} in total",
        )

    def find_unused(
        self, project: Project, progress: ProgressCallback | None = None
    ) -> List[Tuple[Resource, int]]:
        """Return unreferenced resources with their size in bytes, smallest first."""
        candidates = [
            resource
            for resource in self.collect_resources(project)
            if not self._is_ignored(resource) and not _referenced_by_settings(project, resource)
        ]
        _LOGGER.debug("Searching for %d resource candidates", len(candidates))
        remaining = self.search(project, candidates, progress)
        sized = [(resource, size_of(resource.url)) for resource in remaining]
        sized.sort(key=lambda item: (item[1], item[0].path))
        return sized

    def collect_resources(self, project: Project) -> List[Resource]:
        """Return every resource candidate: non-source build files and asset entries."""
        resources: List[Resource] = []
        seen: Set[Path] = set()

        def _add(url: Path) -> None:
            if url in seen:
                return
            seen.add(url)
            resources.append(make_resource(url, project.root))

        for file in project.files:
            if not file.has_target_membership or file.is_source_file:
                continue
            if _is_excluded(file) or not file.url.exists():
                continue
            _add(file.url)

        catalogs = sorted(
            {file.url for file in project.files if file.is_asset_catalog and file.url.is_dir()}
        )
        for catalog in catalogs:
            for directory in iter_asset_directories(catalog):
                # folders inside a catalog carry metadata too, but no extension
                if not directory.suffix:
                    continue
                if project.references_asset_in_catalog_settings(directory.stem):
                    continue
                _add(directory)
        return resources

    def search(
        self,
        project: Project,
        resources: Iterable[Resource],
        progress: ProgressCallback | None = None,
    ) -> List[Resource]:
        """Return the resources not referenced by any source file of ``project``."""
        live = list(resources)
        sources = [file for file in project.files if file.is_source_file and file.url.is_file()]
        for file in track(sources, progress, lambda item: item.path):
            if not live:
                continue
            text = self._read_source(project, file)
            if text is None:
                continue
            flavor = source_flavor(file)
            live = [resource for resource in live if not is_referenced(resource, text, flavor)]
        return live

    def _read_source(self, project: Project, file: FileReference) -> Optional[str]:
        try:
            text = read_text(file.url)
        except (OSError, UnicodeDecodeError) as exc:
            _LOGGER.debug("Skipping unreadable source %s: %s", file.path, exc)
            return None

        flavor = source_flavor(file)
        if not self.keep_comments:
            # strings files share the C comment syntax
            if flavor in (CODE, STRINGS):
                text = strip_code_comments(text)
            elif flavor in (MARKUP, PROPERTY_LIST):
                text = strip_markup_comments(text)
        if flavor == PROPERTY_LIST and project.references_property_list_as_info_plist(file):
            # registering a font is not the same as using it
            text = strip_app_fonts(text)
        return text

    def _is_ignored(self, resource: Resource) -> bool:
        return any(
            fnmatchcase(candidate, pattern)
            for pattern in self.ignored_names
            for candidate in (resource.name, resource.file_name, resource.path)
        )


def _is_excluded(file: FileReference) -> bool:
    if file.kind in EXCLUDED_RESOURCE_KINDS:
        return True
    if file.extension in EXCLUDED_RESOURCE_EXTENSIONS:
        return True
    return file.url.name.startswith(".")


def _referenced_by_settings(project: Project, resource: Resource) -> bool:
    return any(
        project.references_asset_as_app_icon(variant)
        or project.references_storyboard_as_entry_point(variant)
        for variant in (resource.name, resource.file_name)
    )


def _case(resource: Resource, size: int) -> str:
    return f"{resource.path} ({format_size(size)})"


__all__ = [
    "UnusedResourcesDetector",
    "is_referenced",
    "make_resource",
    "name_variants",
    "search_strings",
    "source_flavor",
    "strip_scale",
]
