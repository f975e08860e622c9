"""Detector for asset catalog entries without content."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

from .base import Detector, ProgressCallback, track
from .utils import ASSET_METADATA, iter_asset_directories, list_entries
from ..diagnosis import Defect
from ..logging import get_logger
from ..paths import display_path
from ..project import Project

COLOR_SET_EXTENSION = ".colorset"

_LOGGER = get_logger("detectors.assets")


class EmptyAssetsDetector(Detector):
    """Finds asset directories holding nothing but their metadata.

    Color sets carry no payload files; they are reported instead when
    their metadata declares no color with components.
    """

    defect = Defect.EMPTY_ASSETS

    def detect(self, project: Project, progress: ProgressCallback | None = None) -> List[str]:
        catalogs = sorted(
            {file.url for file in project.files if file.is_asset_catalog and file.url.is_dir()}
        )
        directories = [
            directory for catalog in catalogs for directory in iter_asset_directories(catalog)
        ]

        cases: List[str] = []
        for directory in track(directories, progress, lambda item: item.name):
            try:
                entries = list_entries(directory)
            except OSError as exc:
                _LOGGER.debug("Unable to list %s: %s", directory, exc)
                continue
            # color sets keep their payload inside the metadata itself
            if directory.suffix == COLOR_SET_EXTENSION:
                empty = not _declares_color(directory)
            else:
                empty = len(entries) < 2
            if empty:
                cases.append(display_path(directory, project.root))
        return cases


def _declares_color(directory: Path) -> bool:
    metadata = directory / ASSET_METADATA
    try:
        contents = json.loads(metadata.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        _LOGGER.debug("Unable to read %s: %s", metadata, exc)
        # unreadable metadata is not evidence of an empty color
        return True
    colors = contents.get("colors") if isinstance(contents, dict) else None
    if not isinstance(colors, list):
        return False
    return any(_has_components(entry) for entry in colors)


def _has_components(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    color = entry.get("color")
    if not isinstance(color, dict):
        return False
    return bool(color.get("components"))
