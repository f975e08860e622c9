"""Detector for property lists that fail to parse."""

from __future__ import annotations

from typing import List

from .base import Detector, ProgressCallback, track
from .. import plist
from ..diagnosis import Defect
from ..logging import get_logger
from ..project import Project

_LOGGER = get_logger("detectors.plists")


class CorruptPropertyListsDetector(Detector):
    """Parses every property list on disk and reports those that fail."""

    defect = Defect.CORRUPT_PLISTS

    def detect(self, project: Project, progress: ProgressCallback | None = None) -> List[str]:
        candidates = [
            file for file in project.files if file.is_property_list and file.url.is_file()
        ]
        cases: List[str] = []
        for file in track(candidates, progress, lambda item: item.path):
            try:
                plist.load(file.url)
            except plist.PropertyListError as exc:
                cases.append(f"{file.path}: {exc}")
            except OSError as exc:
                _LOGGER.debug("Unable to read %s: %s", file.url, exc)
                cases.append(f"{file.path}: {exc.strerror or exc}")
        return cases
