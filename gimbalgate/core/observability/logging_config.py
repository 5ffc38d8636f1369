"""
Logging configuration for the gimbal-gate CLI.

Modules log through ``logging.getLogger(__name__)``, so everything lands
under the ``gimbalgate`` logger. Handlers are attached there rather than
to the root logger: a host that embeds the plugin keeps its own logging
untouched, and only the CLI calls into this module.

Console level precedence:
    --debug > --verbose > --quiet > GIMBAL_GATE_LOG_LEVEL > WARNING

A log file can be added with GIMBAL_GATE_LOG_FILE, at its own level
with GIMBAL_GATE_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys

PACKAGE_LOGGER = "gimbalgate"

LOG_LEVEL_ENV = "GIMBAL_GATE_LOG_LEVEL"
LOG_FILE_ENV = "GIMBAL_GATE_LOG_FILE"
LOG_FILE_LEVEL_ENV = "GIMBAL_GATE_LOG_FILE_LEVEL"

# (format, datefmt) per console level; the first entry whose level is >= wins
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "gimbal-gate: %(message)s", None),
)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# The runner's subprocess plumbing logs through asyncio
_NOISY_LOGGERS = ("asyncio",)


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> int:
    """Console level from the CLI flags, falling back to the environment."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    return parse_level(os.environ.get(LOG_LEVEL_ENV))


def parse_level(name: str | None, default: int = logging.WARNING) -> int:
    """Level name → number. Unknown or empty names give ``default``."""
    if not name:
        return default
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else default


def _console_formatter(level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter("%(message)s")


def setup_logging(level: int, log_file: str | None = None, log_file_level: int | None = None) -> logging.Logger:
    """Attach console (stderr) and optional file handlers to the package logger.

    Safe to call more than once; earlier handlers are replaced.

    Returns:
        The configured ``gimbalgate`` logger.
    """
    pkg = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(pkg.handlers):
        pkg.removeHandler(handler)
        handler.close()

    # stdout is reserved for --json output
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(_console_formatter(level))
    pkg.addHandler(console)

    lowest = level
    if log_file:
        file_level = level if log_file_level is None else log_file_level
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        pkg.addHandler(fh)
        lowest = min(lowest, file_level)

    pkg.setLevel(lowest)

    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    return pkg


def configure_cli_logging(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """One-call setup used by the CLI root command."""
    file_level = os.environ.get(LOG_FILE_LEVEL_ENV)
    return setup_logging(
        resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=parse_level(file_level) if file_level else None,
    )
