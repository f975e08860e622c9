"""Logging utilities for xcdoctor commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, TextIO

_LOGGER_NAME = "xcdoctor"

ProgressCallback = Callable[[int, int, Optional[str]], None]


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the xcdoctor hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the xcdoctor logger.

    The console only shows warnings unless ``verbose`` is set, since diagnoses
    are the actual output of a run. A log file always records everything.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_format = "[xcdoctor] %(levelname)s %(message)s"
    if verbose:
        console_format = "[xcdoctor] %(levelname)s %(name)s: %(message)s"
    stream_handler = logging.StreamHandler(stream)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(console_format))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def log_progress(
    logger: logging.Logger, task: str, forward: ProgressCallback | None = None
) -> ProgressCallback:
    """Return a progress callback that records completion of ``task`` at debug level.

    Individual ticks are only passed on to ``forward``; the log gets one line
    when the final ``(total, total, None)`` tick arrives.
    """

    def _report(processed: int, total: int, label: Optional[str]) -> None:
        if label is None and processed >= total:
            logger.debug("%s: processed %d of %d items", task, processed, total)
        if forward is not None:
            forward(processed, total, label)

    return _report


__all__ = ["ProgressCallback", "configure_logging", "get_logger", "log_progress"]
