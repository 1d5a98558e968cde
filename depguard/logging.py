"""Logging for depguard commands.

Diagnostics always go to stderr: ``md`` and ``annotations`` print their
payload on stdout, and GitHub Actions parses every stdout line as a
potential workflow command.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "depguard"
_CONSOLE_FORMAT = "[depguard] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the depguard hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def console_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Console level for the CLI flags; ``--quiet`` wins over ``--verbose``."""
    if quiet:
        return logging.WARNING
    return logging.DEBUG if verbose else logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install the stderr handler and, when ``log_file`` is set, a full DEBUG file sink.

    The file sink records every level regardless of ``quiet`` so a CI job can
    keep the console short and still upload the complete log as an artifact.
    """
    level = console_level(verbose=verbose, quiet=quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    return logger


__all__ = ["configure_logging", "console_level", "get_logger"]
