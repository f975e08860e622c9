"""Property list decoding for project documents and plist resources."""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

import openstep_parser as osp

_XML_MARKERS = (b"<?xml", b"<!DOCTYPE plist", b"<plist")
_BINARY_MARKER = b"bplist"


class PropertyListError(ValueError):
    """Raised when data cannot be decoded as any supported property list format."""


def detect_format(data: bytes) -> str:
    """Return ``binary``, ``xml`` or ``openstep`` for the given raw data."""
    head = data.lstrip(b"\xef\xbb\xbf").lstrip()
    if head.startswith(_BINARY_MARKER):
        return "binary"
    if head.startswith(_XML_MARKERS):
        return "xml"
    return "openstep"


def loads(data: bytes) -> Any:
    """Decode property list data in XML, binary, or legacy openstep format."""
    if not data.strip():
        raise PropertyListError("property list is empty")

    kind = detect_format(data)
    if kind == "openstep":
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise PropertyListError(f"not valid UTF-8 text: {exc}") from exc
        try:
            return osp.OpenStepDecoder.ParseFromString(text)
        except Exception as exc:
            # the openstep decoder signals syntax errors with bare exceptions
            raise PropertyListError(_describe(exc)) from exc

    try:
        return plistlib.loads(data)
    except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError, OverflowError) as exc:
        raise PropertyListError(_describe(exc)) from exc


def load(path: Path) -> Any:
    """Read and decode the property list stored at ``path``."""
    return loads(path.read_bytes())


def _describe(exc: BaseException) -> str:
    message = str(exc).strip()
    if message:
        return message
    return exc.__class__.__name__


__all__ = ["PropertyListError", "detect_format", "load", "loads"]
