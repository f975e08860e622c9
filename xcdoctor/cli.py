"""CLI entrypoint for examining Xcode projects."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from . import __version__
from .diagnosis import EXAMINATION_ORDER, Diagnosis
from .logging import configure_logging
from .orchestrator import Orchestrator
from .project import (
    IncompatibleProjectError,
    ProjectError,
    ProjectNotFoundError,
    ProjectNotSpecifiedError,
)

_PREFIX = "doctor:"
_RED = "\x1b[0;31m"
_YELLOW = "\x1b[0;33m"
_RESET = "\x1b[0m"
_CLEAR_LINE = "\r\x1b[K"


def supports_color(stream: TextIO) -> bool:
    """True when ``stream`` is a terminal that accepts color escape codes."""
    term = os.environ.get("TERM", "")
    if not term or term.lower() == "dumb":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class DiagnosticWriter:
    """Writes diagnoses: cases and conclusions to stdout, help text to stderr."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def note(self, text: str) -> None:
        self._write(self.out, text, _YELLOW)

    def important(self, text: str) -> None:
        self._write(self.out, f"{_PREFIX} {text}", _RED)

    def information(self, text: str) -> None:
        self._write(self.err, text, None)

    def diagnosis(self, diagnosis: Diagnosis) -> None:
        for case in diagnosis.cases:
            self.note(case)
        self.important(diagnosis.conclusion)
        if diagnosis.help:
            self.information(diagnosis.help)

    def progress(self, processed: int, total: int, label: Optional[str]) -> None:
        if not supports_color(self.err):
            return
        message = f"[{processed}/{total}]"
        if label and processed < total:
            message = f"{message} {label}"
        self.err.write(f"{_CLEAR_LINE}{message}")
        if processed >= total:
            self.err.write(_CLEAR_LINE)
        self.err.flush()

    @staticmethod
    def _write(stream: TextIO, text: str, color: str | None) -> None:
        if color is not None and supports_color(stream):
            text = f"{color}{text}{_RESET}"
        print(text, file=stream)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xcdoctor",
        description="Identify and diagnose structural defects in Xcode projects.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help=(
            "Path to an Xcode project bundle, or to a directory containing one "
            "(defaults to the current directory)."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show diagnostic messages and examination progress.",
    )
    parser.add_argument(
        "--keep-comments",
        action="store_true",
        default=None,
        help="Do not strip comments from sources when searching for unused resources.",
    )
    parser.add_argument(
        "--defect",
        dest="defects",
        action="append",
        choices=[defect.value for defect in EXAMINATION_ORDER],
        help="Only examine for this defect (repeatable).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: List[str] | None = None) -> None:
    """CLI entrypoint for xcdoctor."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    writer = DiagnosticWriter()
    verbose = bool(args.verbose)

    def _opening(name: str) -> None:
        writer.information(f"Opening {name} ...")

    def _evaluating(name: str) -> None:
        writer.information(f"Evaluating {name} ...")

    def _examining(name: str) -> None:
        writer.information(f"Examining for {name} ...")

    try:
        result = Orchestrator().run(
            args.path,
            defects=args.defects,
            keep_comments=args.keep_comments,
            before_opening=_opening if verbose else None,
            before_evaluating=_evaluating if verbose else None,
            before_examining=_examining if verbose else None,
            progress=writer.progress if verbose else None,
        )
    except ProjectError as exc:
        parser.exit(1, f"{_describe(exc, args.path)}\n")
    except ValueError as exc:
        parser.exit(1, f"xcdoctor: {exc}\n")

    for diagnosis in result.diagnoses:
        writer.diagnosis(diagnosis)


def _describe(exc: ProjectError, path: str) -> str:
    location = exc.path.as_posix() if exc.path is not None else path
    if isinstance(exc, IncompatibleProjectError):
        return f"{location}: {exc.reason}"
    if isinstance(exc, ProjectNotSpecifiedError):
        return f"{location}: several projects found; specify further: {', '.join(exc.candidates)}"
    if isinstance(exc, ProjectNotFoundError):
        if exc.searched_directory:
            return f"{location}: no Xcode project found"
        return f"{location}: Xcode project not found"
    return f"{location}: {exc}"


if __name__ == "__main__":
    main(sys.argv[1:])
