"""Opening project bundles and building the resolved project model."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from . import plist
from .graph import SOURCES_BUILD_PHASE, GraphError, ObjectGraph, RawObject
from .logging import get_logger
from .models import FileReference, GroupReference, ProductReference
from .paths import UnknownSourceTreeError, assemble_path, display_path, hierarchy_path, resolve_path

PROJECT_EXTENSION = ".xcodeproj"
DOCUMENT_NAME = "project.pbxproj"

# bundles whose contents are referenced through version groups rather than plain groups
EXCLUDED_FILE_KINDS = frozenset({"wrapper.xcdatamodel"})

APP_ICON_SETTING = "ASSETCATALOG_COMPILER_APPICON_NAME"
INFO_PLIST_SETTING = "INFOPLIST_FILE"
CATALOG_NAME_SETTINGS = (
    APP_ICON_SETTING,
    "ASSETCATALOG_COMPILER_ALTERNATE_APPICON_NAMES",
    "ASSETCATALOG_COMPILER_GLOBAL_ACCENT_COLOR_NAME",
    "ASSETCATALOG_COMPILER_WIDGET_BACKGROUND_COLOR_NAME",
    "ASSETCATALOG_COMPILER_COMPLICATION_NAME",
    "ASSETCATALOG_COMPILER_LAUNCHIMAGE_NAME",
)
STORYBOARD_SETTINGS = (
    "INFOPLIST_KEY_UIMainStoryboardFile",
    "INFOPLIST_KEY_UILaunchStoryboardName",
    "INFOPLIST_KEY_NSMainStoryboardFile",
)
ROOT_PLACEHOLDERS = ("$(SRCROOT)", "${SRCROOT}", "$(PROJECT_DIR)", "${PROJECT_DIR}")

EventCallback = Callable[[str], None]

_LOGGER = get_logger("project")


class ProjectError(RuntimeError):
    """Base class for failures to open a project."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class IncompatibleProjectError(ProjectError):
    """The path does not hold a project document this tool can read."""

    def __init__(self, reason: str, path: Path | None = None) -> None:
        super().__init__(reason, path)
        self.reason = reason


class ProjectNotSpecifiedError(ProjectError):
    """A directory search found several project bundles."""

    def __init__(self, candidates: Sequence[str], path: Path | None = None) -> None:
        super().__init__(
            f"several projects found; specify further: {', '.join(candidates)}", path
        )
        self.candidates = list(candidates)


class ProjectNotFoundError(ProjectError):
    """No project exists at the path, or none was found in the searched directory."""

    def __init__(self, searched_directory: bool = False, path: Path | None = None) -> None:
        message = "no Xcode project found" if searched_directory else "Xcode project not found"
        super().__init__(message, path)
        self.searched_directory = searched_directory


class Project:
    """Read-only model of a project: resolved files, groups and targets.

    All references are resolved once at construction; detectors only ever
    read from the model.
    """

    def __init__(self, root: Path, graph: ObjectGraph, bundle: Path | None = None) -> None:
        self.root = Path(os.path.normpath(os.path.abspath(root)))
        self.bundle = bundle
        self._graph = graph
        self._settings: Tuple[Dict[str, Any], ...] = tuple(
            config.mapping("buildSettings") for config in graph.build_configurations
        )
        self.files: Tuple[FileReference, ...] = tuple(self._resolve_files())
        self.groups: Tuple[GroupReference, ...] = tuple(self._resolve_groups())
        self.products: Tuple[ProductReference, ...] = tuple(self._resolve_products())
        _LOGGER.debug(
            "Resolved %d files, %d groups and %d targets under %s",
            len(self.files),
            len(self.groups),
            len(self.products),
            self.root,
        )

    @classmethod
    def from_document(cls, document: Any, root: Path, bundle: Path | None = None) -> "Project":
        """Build a project from a decoded document.

        Raises GraphError when the document is not an object graph and
        UnknownSourceTreeError when a reference uses an anchor outside the known set.
        """
        return cls(root, ObjectGraph.from_document(document), bundle=bundle)

    @property
    def name(self) -> str:
        if self.bundle is not None:
            return self.bundle.stem
        return self.root.name

    @property
    def build_settings(self) -> Tuple[Dict[str, Any], ...]:
        return self._settings

    def references_asset_as_app_icon(self, name: str) -> bool:
        """True when any build configuration names ``name`` as its app icon."""
        return any(value == name for value in self._setting_values(APP_ICON_SETTING))

    def references_asset_in_catalog_settings(self, name: str) -> bool:
        """True when the asset catalog compiler is told about ``name`` directly."""
        for key in CATALOG_NAME_SETTINGS:
            for value in self._setting_values(key):
                if name in value.split():
                    return True
        return False

    def references_storyboard_as_entry_point(self, name: str) -> bool:
        """True when ``name`` is configured as a main or launch storyboard."""
        for key in STORYBOARD_SETTINGS:
            for value in self._setting_values(key):
                if value == name or Path(value).stem == name:
                    return True
        return False

    def references_property_list_as_info_plist(self, file: FileReference) -> bool:
        """True when any build configuration uses ``file`` as its Info.plist."""
        location = file.url.as_posix()
        for value in self._setting_values(INFO_PLIST_SETTING):
            setting = value
            for placeholder in ROOT_PLACEHOLDERS:
                setting = setting.replace(placeholder, self.root.as_posix())
            if setting and location.endswith(setting):
                return True
        return False

    def _setting_values(self, key: str) -> Iterator[str]:
        for settings in self._settings:
            value = settings.get(key)
            if isinstance(value, str):
                yield value
            elif isinstance(value, (list, tuple)):
                yield from (item for item in value if isinstance(item, str))

    def _resolve_files(self) -> Iterator[FileReference]:
        graph = self._graph
        for obj in graph.file_references:
            kind = obj.string("explicitFileType") or obj.string("lastKnownFileType")
            if kind in EXCLUDED_FILE_KINDS:
                continue
            path = assemble_path(obj, graph)
            if path is None:
                _LOGGER.debug("Skipping unresolvable file reference %s", obj.id)
                continue
            url = resolve_path(path, self.root)
            yield FileReference(
                id=obj.id,
                url=url,
                path=display_path(url, self.root),
                kind=kind,
                has_target_membership=graph.is_build_member(obj.id),
            )

    def _resolve_groups(self) -> Iterator[GroupReference]:
        graph = self._graph
        for obj in graph.groups:
            directory: Optional[Path] = None
            assembled = assemble_path(obj, graph)
            if assembled is not None:
                directory = resolve_path(assembled, self.root)
            yield GroupReference(
                id=obj.id,
                name=obj.string("name") or obj.string("path") or "",
                display_path=hierarchy_path(obj, graph),
                directory=directory,
                path=display_path(directory, self.root) if directory is not None else None,
                has_children=bool(obj.identifiers("children")),
            )

    def _resolve_products(self) -> Iterator[ProductReference]:
        graph = self._graph
        for obj in graph.native_targets:
            name = obj.string("name") or obj.string("productName")
            if not name:
                _LOGGER.debug("Skipping unnamed target %s", obj.id)
                continue
            phases = graph.resolve_all(obj.identifiers("buildPhases") or [])
            yield ProductReference(
                id=obj.id,
                name=name,
                builds_at_least_one_source=_compiles_sources(phases),
            )


def _compiles_sources(phases: List[RawObject]) -> bool:
    return any(
        phase.kind == SOURCES_BUILD_PHASE and bool(phase.identifiers("files"))
        for phase in phases
    )


def find_project_bundle(location: Path) -> Path:
    """Return the project bundle at ``location`` or the single one inside it."""
    if not location.exists():
        raise ProjectNotFoundError(searched_directory=False, path=location)
    if not location.is_dir():
        raise IncompatibleProjectError("not an Xcode project", path=location)
    if location.suffix == PROJECT_EXTENSION:
        return location

    candidates = sorted(
        entry.name for entry in location.iterdir() if entry.name.endswith("xcodeproj")
    )
    if not candidates:
        raise ProjectNotFoundError(searched_directory=True, path=location)
    if len(candidates) > 1:
        raise ProjectNotSpecifiedError(candidates, path=location)
    return location / candidates[0]


def open_project(
    path: str | Path,
    *,
    before_opening: EventCallback | None = None,
    before_evaluating: EventCallback | None = None,
) -> Project:
    """Open and evaluate the project at ``path``.

    ``path`` may point at a project bundle or at a directory containing
    exactly one. Raises a ProjectError subclass when no model can be built.
    """
    location = Path(os.path.abspath(Path(path).expanduser()))
    bundle = find_project_bundle(location)
    document_path = bundle / DOCUMENT_NAME
    if not document_path.is_file():
        raise IncompatibleProjectError("unsupported Xcode project format", path=location)

    if before_opening is not None:
        before_opening(bundle.name)
    _LOGGER.info("Opening %s", bundle)
    try:
        document = plist.load(document_path)
    except (OSError, plist.PropertyListError) as exc:
        _LOGGER.debug("Failed to decode %s: %s", document_path, exc)
        raise IncompatibleProjectError("unsupported Xcode project format", path=location) from exc

    if before_evaluating is not None:
        before_evaluating(bundle.name)
    _LOGGER.info("Evaluating %s", bundle)
    try:
        return Project.from_document(document, root=bundle.parent, bundle=bundle)
    except GraphError as exc:
        raise IncompatibleProjectError(
            f"unsupported Xcode project format ({exc})", path=location
        ) from exc
    except UnknownSourceTreeError as exc:
        raise IncompatibleProjectError(str(exc), path=location) from exc


__all__ = [
    "EXCLUDED_FILE_KINDS",
    "EventCallback",
    "IncompatibleProjectError",
    "Project",
    "ProjectError",
    "ProjectNotFoundError",
    "ProjectNotSpecifiedError",
    "find_project_bundle",
    "open_project",
]
