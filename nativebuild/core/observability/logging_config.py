"""
Logging configuration for the nativebuild CLI.

main.py calls ``setup_logging`` once; modules log through
``logging.getLogger(__name__)``. The console level comes from the
CLI flags, then ``NBUILD_LOG_LEVEL``, then WARNING. ``NBUILD_LOG_FILE``
adds a detailed file log with its own ``NBUILD_LOG_FILE_LEVEL``.

cmake and ninja write straight to the inherited stdout/stderr; only
our own messages pass through these handlers (on stderr).
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

# (max level, format, datefmt) — first row whose level >= console level wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with ours.

    Args:
        level: Console level name.
        log_file: Optional log file path.
        log_file_level: Level for the file (default: ``level``).
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    # root must let through whatever the most verbose handler wants
    root.setLevel(min(h.level for h in handlers))

    logging.raiseExceptions = False


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Console level from CLI flags, falling back to NBUILD_LOG_LEVEL."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    environ = os.environ if environ is None else environ
    return environ.get("NBUILD_LOG_LEVEL", "WARNING")


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next((f, d) for limit, f, d in _CONSOLE_FORMATS if level <= limit)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
