"""Examination orchestration: open a project, run detectors, collect diagnoses."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from .config import ConfigError, XcDoctorConfig, load_config
from .detectors import Detector, ProgressCallback, discover_detectors
from .diagnosis import Diagnosis
from .logging import get_logger, log_progress
from .project import EventCallback, Project, open_project

ExaminationCallback = Callable[[str], None]


@dataclass
class ExaminationResult:
    """Outcome of examining one project."""

    project: Project
    diagnoses: List[Diagnosis] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return not self.diagnoses


class Orchestrator:
    """Sequences detectors against a project and reports progress along the way."""

    def __init__(self, detectors: Optional[Iterable[Detector]] = None) -> None:
        self._detector_overrides = list(detectors) if detectors is not None else None
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path,
        *,
        defects: Sequence[str] | None = None,
        keep_comments: bool | None = None,
        before_opening: EventCallback | None = None,
        before_evaluating: EventCallback | None = None,
        before_examining: ExaminationCallback | None = None,
        progress: ProgressCallback | None = None,
    ) -> ExaminationResult:
        """Open the project at ``path`` and examine it.

        Raises a ProjectError when the project cannot be opened; detection
        itself never fails.
        """
        project = open_project(
            path,
            before_opening=before_opening,
            before_evaluating=before_evaluating,
        )
        config = self.load_config(project.root)
        if keep_comments is not None:
            config.unused_resources = replace(
                config.unused_resources, keep_comments=keep_comments
            )
        detectors = self.select_detectors(config, defects)
        diagnoses = self.examine(
            project,
            detectors,
            before_examining=before_examining,
            progress=progress,
        )
        return ExaminationResult(project=project, diagnoses=diagnoses)

    def examine(
        self,
        project: Project,
        detectors: Sequence[Detector],
        *,
        before_examining: ExaminationCallback | None = None,
        progress: ProgressCallback | None = None,
    ) -> List[Diagnosis]:
        """Run each detector in turn and return the diagnoses that have cases."""
        diagnoses: List[Diagnosis] = []
        for detector in detectors:
            if before_examining is not None:
                before_examining(detector.name)
            self.logger.debug("Running detector %s", detector.__class__.__name__)
            try:
                diagnosis = detector.examine(
                    project, log_progress(self.logger, detector.name, progress)
                )
            except Exception as exc:  # pragma: no cover - third-party detector failure
                self._log_exception(f"Detector {detector.name} failed", exc)
                continue
            if diagnosis is not None:
                self.logger.info("%s: %d cases", detector.name, len(diagnosis.cases))
                diagnoses.append(diagnosis)
        return diagnoses

    def select_detectors(
        self, config: XcDoctorConfig, defects: Sequence[str] | None = None
    ) -> List[Detector]:
        if self._detector_overrides is not None:
            return list(self._detector_overrides)
        if defects:
            return discover_detectors(list(defects), config.unused_resources)
        try:
            return discover_detectors(config.defects.enabled or None, config.unused_resources)
        except ValueError as exc:
            self.logger.warning("Ignoring configured defects: %s", exc)
            return discover_detectors(None, config.unused_resources)

    def load_config(self, root: Path) -> XcDoctorConfig:
        try:
            return load_config(root)
        except ConfigError as exc:
            self.logger.warning("Ignoring configuration: %s", exc)
            return XcDoctorConfig(root=root)

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


__all__ = ["ExaminationResult", "Orchestrator"]
