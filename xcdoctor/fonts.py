"""Extraction of the names a font file registers itself under."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import List, Set

from fontTools.ttLib import TTCollection, TTFont, TTLibError

from .logging import get_logger

FONT_EXTENSIONS = frozenset({"ttf", "otf", "ttc"})

# name table record ids
FULL_NAME_ID = 4
POSTSCRIPT_NAME_ID = 6

_LOGGER = get_logger("fonts")


def is_font(path: Path) -> bool:
    return path.suffix[1:].lower() in FONT_EXTENSIONS


def font_names(path: Path) -> Set[str]:
    """Return the full and PostScript names stored in the font at ``path``.

    Unreadable or malformed fonts yield an empty set.
    """
    names: Set[str] = set()
    try:
        if path.suffix.lower() == ".ttc":
            collection = TTCollection(str(path), lazy=True)
            fonts: List[TTFont] = list(collection.fonts)
        else:
            fonts = [TTFont(str(path), lazy=True)]
    except (OSError, TTLibError, struct.error, ValueError) as exc:
        _LOGGER.debug("Unable to read font %s: %s", path, exc)
        return names

    for font in fonts:
        try:
            table = font["name"]
            for name_id in (FULL_NAME_ID, POSTSCRIPT_NAME_ID):
                value = table.getDebugName(name_id)
                if value:
                    names.add(value)
        except (KeyError, TTLibError, struct.error, ValueError) as exc:
            _LOGGER.debug("Font %s has no readable name table: %s", path, exc)
        finally:
            font.close()
    return names


__all__ = ["FONT_EXTENSIONS", "font_names", "is_font"]
