"""Defect kinds and the diagnoses reported for them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple


class Defect(str, Enum):
    """Kinds of structural defects a project can be examined for."""

    NON_EXISTENT_FILES = "non_existent_files"
    NON_EXISTENT_PATHS = "non_existent_paths"
    CORRUPT_PLISTS = "corrupt_plists"
    DANGLING_FILES = "dangling_files"
    EMPTY_GROUPS = "empty_groups"
    EMPTY_TARGETS = "empty_targets"
    EMPTY_ASSETS = "empty_assets"
    UNUSED_RESOURCES = "unused_resources"

    def __str__(self) -> str:
        return self.value


# ordered so the most important diagnosis is examined (and printed) last,
# since the end of the output is what gets read first
EXAMINATION_ORDER: Tuple[Defect, ...] = (
    Defect.UNUSED_RESOURCES,
    Defect.EMPTY_ASSETS,
    Defect.EMPTY_GROUPS,
    Defect.DANGLING_FILES,
    Defect.EMPTY_TARGETS,
    Defect.CORRUPT_PLISTS,
    Defect.NON_EXISTENT_FILES,
    Defect.NON_EXISTENT_PATHS,
)


@dataclass(frozen=True)
class _Wording:
    singular: str
    plural: str
    help: Optional[str]


_WORDING: Dict[Defect, _Wording] = {
    Defect.NON_EXISTENT_FILES: _Wording(
        "{count} non-existent file is referenced",
        "{count} non-existent files are referenced",
        "These files are not present on the file system and could have been moved or removed.\n"
        "In either case, each reference should be resolved or removed from the project.",
    ),
    Defect.NON_EXISTENT_PATHS: _Wording(
        "{count} non-existent group path is referenced",
        "{count} non-existent group paths are referenced",
        "These groups point to directories that are not present on the file system.\n"
        "Each path should be corrected, or cleared if the group is not meant to be a folder.",
    ),
    Defect.CORRUPT_PLISTS: _Wording(
        "{count} corrupt property list found",
        "{count} corrupt property lists found",
        "These files could not be parsed and must be fixed manually using any plain-text editor.",
    ),
    Defect.DANGLING_FILES: _Wording(
        "{count} file is not included in any target",
        "{count} files are not included in any target",
        "These files are never being compiled and could potentially be removed.",
    ),
    Defect.EMPTY_GROUPS: _Wording(
        "{count} empty group found",
        "{count} empty groups found",
        "These groups contain zero children and should be removed.",
    ),
    Defect.EMPTY_TARGETS: _Wording(
        "{count} empty target found",
        "{count} empty targets found",
        "These targets do not compile any sources and could potentially be removed.",
    ),
    Defect.EMPTY_ASSETS: _Wording(
        "{count} empty asset found",
        "{count} empty assets found",
        "These assets have no content and should be removed from their catalog.",
    ),
    Defect.UNUSED_RESOURCES: _Wording(
        "{count} unused resource found",
        "{count} unused resources found",
        "These resources do not appear to be referenced by any source file.\n"
        "The search is a heuristic: it can miss dynamically built names and can be fooled\n"
        "by coincidental matches, so verify each case before removing it from the project.",
    ),
}


@dataclass(frozen=True)
class Diagnosis:
    """Conclusion, help text and cases reported for one defect kind."""

    defect: Defect
    conclusion: str
    help: Optional[str]
    cases: Tuple[str, ...]


def conclude(defect: Defect, count: int, detail: Optional[str] = None) -> str:
    """Return the conclusion line for ``count`` cases of ``defect``."""
    wording = _WORDING[defect]
    template = wording.singular if count == 1 else wording.plural
    conclusion = template.format(count=count)
    if detail:
        conclusion = f"{conclusion} ({detail})"
    return conclusion


def help_text(defect: Defect) -> Optional[str]:
    return _WORDING[defect].help


def diagnose(
    defect: Defect,
    cases: Iterable[str],
    *,
    preserve_order: bool = False,
    detail: Optional[str] = None,
) -> Optional[Diagnosis]:
    """Package detector output as a diagnosis; None when there are no cases.

    Cases are sorted lexicographically unless the detector already defines
    its own ordering.
    """
    ordered = list(cases) if preserve_order else sorted(cases)
    if not ordered:
        return None
    return Diagnosis(
        defect=defect,
        conclusion=conclude(defect, len(ordered), detail),
        help=help_text(defect),
        cases=tuple(ordered),
    )


__all__ = [
    "Defect",
    "Diagnosis",
    "EXAMINATION_ORDER",
    "conclude",
    "diagnose",
    "help_text",
]
