"""Object graph loading for project documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Set

from .logging import get_logger

FILE_REFERENCE = "PBXFileReference"
GROUP_KINDS = frozenset({"PBXGroup", "PBXVariantGroup"})
BUILD_FILE = "PBXBuildFile"
BUILD_CONFIGURATION = "XCBuildConfiguration"
NATIVE_TARGET = "PBXNativeTarget"
SOURCES_BUILD_PHASE = "PBXSourcesBuildPhase"

_LOGGER = get_logger("graph")


class GraphError(ValueError):
    """Raised when a decoded document does not look like a project object graph."""


@dataclass(frozen=True)
class RawObject:
    """One entry of the ``objects`` table, keyed by its opaque identifier."""

    id: str
    kind: str
    properties: Mapping[str, Any] = field(default_factory=dict)

    def string(self, key: str) -> Optional[str]:
        value = self.properties.get(key)
        return value if isinstance(value, str) else None

    def identifiers(self, key: str) -> Optional[List[str]]:
        """Return a list of object ids stored under ``key``, or None when malformed."""
        value = self.properties.get(key)
        if not isinstance(value, (list, tuple)):
            return None
        return [item for item in value if isinstance(item, str)]

    def mapping(self, key: str) -> Dict[str, Any]:
        value = self.properties.get(key)
        return dict(value) if isinstance(value, Mapping) else {}


class ObjectGraph:
    """Flat, classified view over the objects of a project document.

    Objects are partitioned by their ``isa`` discriminator into file references,
    groups, build files, build configurations and native targets. A reverse
    child-to-parent index is built once so ancestor walks never rescan the
    whole table.
    """

    def __init__(self, objects: Mapping[str, RawObject]) -> None:
        self.objects: Dict[str, RawObject] = dict(objects)
        self.file_references: List[RawObject] = []
        self.groups: List[RawObject] = []
        self.build_files: List[RawObject] = []
        self.build_configurations: List[RawObject] = []
        self.native_targets: List[RawObject] = []

        for obj in self.objects.values():
            if obj.kind == FILE_REFERENCE:
                self.file_references.append(obj)
            elif obj.kind in GROUP_KINDS:
                if obj.identifiers("children") is None:
                    _LOGGER.debug("Dropping group %s without a children list", obj.id)
                    continue
                self.groups.append(obj)
            elif obj.kind == BUILD_FILE:
                self.build_files.append(obj)
            elif obj.kind == BUILD_CONFIGURATION:
                self.build_configurations.append(obj)
            elif obj.kind == NATIVE_TARGET:
                self.native_targets.append(obj)

        self._parents: Dict[str, List[str]] = {}
        for group in self.groups:
            for child in group.identifiers("children") or []:
                self._parents.setdefault(child, []).append(group.id)

        self._build_targets: Set[str] = set()
        for build_file in self.build_files:
            target = build_file.string("fileRef")
            if target:
                self._build_targets.add(target)
            else:
                _LOGGER.debug("Ignoring build file %s without a fileRef", build_file.id)

    @classmethod
    def from_document(cls, document: Any) -> "ObjectGraph":
        """Build a graph from a decoded document; raise GraphError when incompatible."""
        if not isinstance(document, Mapping):
            raise GraphError("document is not a mapping at top level")
        table = document.get("objects")
        if not isinstance(table, Mapping):
            raise GraphError("document has no objects table")

        objects: Dict[str, RawObject] = {}
        for key, value in table.items():
            if not isinstance(key, str) or not isinstance(value, Mapping):
                continue
            kind = value.get("isa")
            if not isinstance(kind, str):
                _LOGGER.debug("Dropping object %s without an isa", key)
                continue
            objects[key] = RawObject(id=key, kind=kind, properties=value)
        return cls(objects)

    def get(self, identifier: str) -> Optional[RawObject]:
        return self.objects.get(identifier)

    def parent(self, identifier: str) -> Optional[RawObject]:
        """Return the group declaring ``identifier`` as a child.

        A well-formed document has at most one parent per child; when several
        groups claim the same child the first one found is used.
        """
        parents = self._parents.get(identifier)
        if not parents:
            return None
        if len(parents) > 1:
            _LOGGER.debug("Object %s has %d parents; using the first", identifier, len(parents))
        return self.objects.get(parents[0])

    def ancestors(self, identifier: str) -> Iterator[RawObject]:
        """Yield parent groups from the nearest upward, guarding against cycles."""
        seen: Set[str] = {identifier}
        current = self.parent(identifier)
        while current is not None and current.id not in seen:
            seen.add(current.id)
            yield current
            current = self.parent(current.id)

    def is_build_member(self, identifier: str) -> bool:
        """True when the object, or any ancestor group, is the target of a build file."""
        if identifier in self._build_targets:
            return True
        return any(group.id in self._build_targets for group in self.ancestors(identifier))

    def resolve_all(self, identifiers: Sequence[str]) -> List[RawObject]:
        return [obj for obj in (self.objects.get(key) for key in identifiers) if obj is not None]


__all__ = [
    "BUILD_CONFIGURATION",
    "BUILD_FILE",
    "FILE_REFERENCE",
    "GROUP_KINDS",
    "GraphError",
    "NATIVE_TARGET",
    "ObjectGraph",
    "RawObject",
    "SOURCES_BUILD_PHASE",
]
