"""Defect detector implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, List, Sequence, Set

from .assets import EmptyAssetsDetector
from .base import Detector, ProgressCallback, track
from .plists import CorruptPropertyListsDetector
from .references import DanglingFilesDetector, NonExistentFilesDetector, NonExistentPathsDetector
from .resources import UnusedResourcesDetector
from .structure import EmptyGroupsDetector, EmptyTargetsDetector
from ..config import UnusedResourcesConfig
from ..diagnosis import EXAMINATION_ORDER, Defect

_ENTRY_POINT_GROUP = "xcdoctor.detectors"

_BUILTIN_FACTORIES: Dict[Defect, Callable[[UnusedResourcesConfig], Detector]] = {
    Defect.UNUSED_RESOURCES: lambda options: UnusedResourcesDetector(
        keep_comments=options.keep_comments,
        ignored_names=options.ignored_names,
    ),
    Defect.EMPTY_ASSETS: lambda options: EmptyAssetsDetector(),
    Defect.EMPTY_GROUPS: lambda options: EmptyGroupsDetector(),
    Defect.DANGLING_FILES: lambda options: DanglingFilesDetector(),
    Defect.EMPTY_TARGETS: lambda options: EmptyTargetsDetector(),
    Defect.CORRUPT_PLISTS: lambda options: CorruptPropertyListsDetector(),
    Defect.NON_EXISTENT_FILES: lambda options: NonExistentFilesDetector(),
    Defect.NON_EXISTENT_PATHS: lambda options: NonExistentPathsDetector(),
}


def discover_detectors(
    enabled: Sequence[str] | None = None,
    unused_resources: UnusedResourcesConfig | None = None,
) -> List[Detector]:
    """Return instantiated detectors in examination order, honoring optional enabled names."""

    options = unused_resources or UnusedResourcesConfig()
    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    detectors: List[Detector] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], Detector]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, Detector):
            raise TypeError(f"Detector factory for '{name}' did not return a Detector instance")
        detectors.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for defect in EXAMINATION_ORDER:
        builtin = _BUILTIN_FACTORIES[defect]
        _add(defect.value, lambda builtin=builtin: builtin(options))

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - third-party plugin failure
            raise RuntimeError(f"Failed to load detector entry point '{entry.name}': {exc}") from exc

        def _factory(obj: object = loaded) -> Detector:
            return _coerce_detector(obj)

        _add(entry.name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown defects requested: {missing}")

    return detectors


def _coerce_detector(obj: object) -> Detector:
    if isinstance(obj, Detector):
        return obj
    if isinstance(obj, type) and issubclass(obj, Detector):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Detector):
            return instance
    raise TypeError("Detector entry point must be a Detector subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "CorruptPropertyListsDetector",
    "DanglingFilesDetector",
    "Detector",
    "EmptyAssetsDetector",
    "EmptyGroupsDetector",
    "EmptyTargetsDetector",
    "NonExistentFilesDetector",
    "NonExistentPathsDetector",
    "ProgressCallback",
    "UnusedResourcesDetector",
    "discover_detectors",
    "track",
]
