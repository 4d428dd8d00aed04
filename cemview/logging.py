"""Logging setup shared by the cemview CLI and service."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, TextIO

_ROOT = "cemview"
_CONSOLE_FORMAT = "[cemview] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``cemview`` hierarchy, e.g. ``cemview.query``."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def _level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def _with_format(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Send cemview records to ``stream`` (stderr by default) and optionally a file.

    stdout is left to command output. Each call replaces the handlers a
    previous call installed; ``verbose`` wins over ``quiet``.
    """
    level = _level(verbose, quiet)
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [
        _with_format(logging.StreamHandler(stream or sys.stderr), level, _CONSOLE_FORMAT)
    ]
    if log_file is not None:
        handlers.append(
            _with_format(logging.FileHandler(log_file, encoding="utf-8"), level, _FILE_FORMAT)
        )
    for handler in handlers:
        logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
