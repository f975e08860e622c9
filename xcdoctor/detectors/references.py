"""Detectors for references that point nowhere or belong nowhere."""

from __future__ import annotations

from typing import List

from .base import Detector, ProgressCallback
from ..diagnosis import Defect
from ..project import Project


class NonExistentFilesDetector(Detector):
    """Finds file references whose resolved path is missing on disk."""

    defect = Defect.NON_EXISTENT_FILES

    def detect(self, project: Project, progress: ProgressCallback | None = None) -> List[str]:
        return [file.path for file in project.files if not file.url.exists()]


class NonExistentPathsDetector(Detector):
    """Finds groups whose own directory path is missing on disk.

    Groups without a path of their own are not folders and are never reported.
    """

    defect = Defect.NON_EXISTENT_PATHS

    def detect(self, project: Project, progress: ProgressCallback | None = None) -> List[str]:
        cases: List[str] = []
        for group in project.groups:
            if group.directory is None or group.path is None:
                continue
            if not group.directory.exists():
                cases.append(group.path)
        return cases


class DanglingFilesDetector(Detector):
    """Finds source files that no target builds."""

    defect = Defect.DANGLING_FILES

    def detect(self, project: Project, progress: ProgressCallback | None = None) -> List[str]:
        cases: List[str] = []
        for file in project.files:
            if not file.is_source_file or file.has_target_membership:
                continue
            # headers are included by other sources rather than built directly
            if file.is_header_file:
                continue
            if file.is_property_list and project.references_property_list_as_info_plist(file):
                continue
            cases.append(file.path)
        return cases
