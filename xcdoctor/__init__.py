"""Diagnose structural defects in Xcode projects."""

from .diagnosis import Defect, Diagnosis
from .project import (
    IncompatibleProjectError,
    Project,
    ProjectError,
    ProjectNotFoundError,
    ProjectNotSpecifiedError,
    open_project,
)

__version__ = "0.5.1"

__all__ = [
    "Defect",
    "Diagnosis",
    "IncompatibleProjectError",
    "Project",
    "ProjectError",
    "ProjectNotFoundError",
    "ProjectNotSpecifiedError",
    "__version__",
    "open_project",
]
