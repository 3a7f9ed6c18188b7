"""
Logging setup for the addonctl CLI.

Logging carries diagnostics only: kubectl argv traces, cluster writes,
and wizard steps that failed but let the run continue.  Anything the
operator is meant to read goes through the prompt provider instead.

The console level comes from --debug / --verbose / --quiet, then
ADDONCTL_LOG_LEVEL, then WARNING.  ADDONCTL_LOG_FILE adds a file
handler, at ADDONCTL_LOG_FILE_LEVEL when set.
"""

from __future__ import annotations

import logging
import sys

# Every kubectl argv is logged here at DEBUG
KUBECTL_LOGGER = "addonctl.kubectl"

_TIME = "%H:%M:%S"

# (upper bound, format, datefmt); the first tier the level fits wins
_CONSOLE_TIERS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s", _TIME),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", _TIME),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    trace_kubectl: bool = False,
) -> None:
    """Install the console handler, and the file handler when asked.

    Args:
        level: Console level name.
        log_file: Path of an extra log file.
        log_file_level: Level for the file; defaults to ``level``.
        trace_kubectl: Emit kubectl argv traces at any console level.
    """
    console_level = _parse_level(level)
    fmt, datefmt = next(
        (f, d) for bound, f, d in _CONSOLE_TIERS if console_level <= bound
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    lowest = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        lowest = min(lowest, file_level)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(fh)
    root.setLevel(lowest)

    tracing = trace_kubectl or lowest <= logging.DEBUG
    logging.getLogger(KUBECTL_LOGGER).setLevel(logging.DEBUG if tracing else logging.WARNING)

    # handlers may outlive a CliRunner's captured stream in tests
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to its number; unknown or empty names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
