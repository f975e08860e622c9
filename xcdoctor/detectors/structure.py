"""Detectors for empty containers in the project hierarchy."""

from __future__ import annotations

from typing import List

from .base import Detector, ProgressCallback
from ..diagnosis import Defect
from ..project import Project


class EmptyGroupsDetector(Detector):
    """Finds groups with zero children, reported by their hierarchy path.

    A group with no labelled ancestry (the main group of an empty project) is
    reported under the project name.
    """

    defect = Defect.EMPTY_GROUPS

    def detect(self, project: Project, progress: ProgressCallback | None = None) -> List[str]:
        return [
            group.display_path or project.name
            for group in project.groups
            if not group.has_children
        ]


class EmptyTargetsDetector(Detector):
    """Finds targets that do not compile a single source file."""

    defect = Defect.EMPTY_TARGETS

    def detect(self, project: Project, progress: ProgressCallback | None = None) -> List[str]:
        return [
            product.name for product in project.products if not product.builds_at_least_one_source
        ]
