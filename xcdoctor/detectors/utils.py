"""Shared helper utilities for detector implementations."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterator, List

from ..logging import get_logger

ASSET_METADATA = "Contents.json"

_LOGGER = get_logger("detectors")

# Comment stripping

BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
# the lookbehind keeps scheme separators (e.g. "https://") intact
LINE_COMMENT = re.compile(r"(?<!:)//.*")
MARKUP_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
APP_FONTS_ENTRY = re.compile(r"<key>\s*UIAppFonts\s*</key>\s*<array>.*?</array>", re.DOTALL)


def strip_code_comments(text: str) -> str:
    return LINE_COMMENT.sub("", BLOCK_COMMENT.sub("", text))


def strip_markup_comments(text: str) -> str:
    return MARKUP_COMMENT.sub("", text)


def strip_app_fonts(text: str) -> str:
    """Remove the font registration array from Info.plist contents."""
    return APP_FONTS_ENTRY.sub("", text)


# Text reading


def read_text(path: Path) -> str:
    """Read a source file as text, honoring UTF-16 byte order marks.

    Raises OSError or UnicodeDecodeError when the file cannot be read.
    """
    data = path.read_bytes()
    if data.startswith((b"\xff\xfe", b"\xfe\xff")):
        return data.decode("utf-16")
    return data.decode("utf-8-sig")


# Asset catalogs


def is_asset_directory(path: Path) -> bool:
    return (path / ASSET_METADATA).is_file()


def iter_asset_directories(catalog: Path) -> Iterator[Path]:
    """Yield every directory below ``catalog`` that carries asset metadata."""
    for dirpath, dirnames, _ in os.walk(catalog):
        dirnames.sort()
        current = Path(dirpath)
        if current == catalog:
            continue
        if is_asset_directory(current):
            yield current


def list_entries(path: Path) -> List[str]:
    return [name for name in os.listdir(path) if not name.startswith(".")]


# Sizes


def size_of(path: Path) -> int:
    """Return the size of a file, or the recursive size of a directory, in bytes."""
    try:
        if not path.is_dir():
            return path.stat().st_size
    except OSError as exc:
        _LOGGER.debug("Unable to size %s: %s", path, exc)
        return 0

    total = 0
    for dirpath, _, filenames in os.walk(path):
        for filename in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, filename)).st_size
            except OSError as exc:
                _LOGGER.debug("Unable to size %s: %s", filename, exc)
    return total


_UNITS = ("KB", "MB", "GB", "TB")


def format_size(size: int) -> str:
    """Return a human-readable size using decimal units."""
    if size < 1000:
        return "1 byte" if size == 1 else f"{size} bytes"
    value = float(size)
    for unit in _UNITS:
        value /= 1000
        # decide on the rounded value so 999.96 KB reads as 1.0 MB
        if round(value, 1) < 1000:
            break
    return f"{value:.1f} {unit}"


__all__ = [
    "ASSET_METADATA",
    "format_size",
    "is_asset_directory",
    "iter_asset_directories",
    "list_entries",
    "read_text",
    "size_of",
    "strip_app_fonts",
    "strip_code_comments",
    "strip_markup_comments",
]
