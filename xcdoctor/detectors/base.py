"""Base classes for defect detectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional, Sequence, TypeVar

from ..diagnosis import Defect, Diagnosis, diagnose
from ..logging import ProgressCallback
from ..project import Project

T = TypeVar("T")


class Detector(ABC):
    """Contract for detectors that report one kind of defect in a project.

    Detectors never mutate the project and may run in any order.
    """

    defect: Defect
    # set when ``detect`` returns cases in a meaningful order of its own
    preserves_order: bool = False

    @property
    def name(self) -> str:
        return self.defect.value

    @abstractmethod
    def detect(self, project: Project, progress: ProgressCallback | None = None) -> List[str]:
        """Return one case string per violation found; empty when there are none."""

    def examine(
        self, project: Project, progress: ProgressCallback | None = None
    ) -> Optional[Diagnosis]:
        """Run detection and package the cases as a diagnosis."""
        return diagnose(
            self.defect,
            self.detect(project, progress),
            preserve_order=self.preserves_order,
        )


def track(
    items: Sequence[T],
    progress: ProgressCallback | None,
    label: Callable[[T], Optional[str]] | None = None,
) -> Iterator[T]:
    """Yield ``items``, reporting progress after each and once more at completion."""
    total = len(items)
    for index, item in enumerate(items, start=1):
        yield item
        if progress is not None:
            progress(index, total, label(item) if label is not None else None)
    if progress is not None:
        progress(total, total, None)


__all__ = ["Detector", "ProgressCallback", "track"]
