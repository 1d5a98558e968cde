"""Tests for depguard logging configuration."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from depguard.logging import configure_logging, console_level, get_logger


def test_get_logger_nests_under_depguard() -> None:
    assert get_logger("engine").name == "depguard.engine"
    assert get_logger().name == "depguard"


def test_quiet_overrides_verbose() -> None:
    assert console_level() == logging.INFO
    assert console_level(verbose=True) == logging.DEBUG
    assert console_level(verbose=True, quiet=True) == logging.WARNING


def test_console_handler_writes_to_stderr() -> None:
    logger = configure_logging()

    (handler,) = logger.handlers
    assert handler.stream is sys.stderr
    assert logger.propagate is False


def test_repeated_configuration_replaces_handlers(tmp_path: Path) -> None:
    configure_logging(log_file=tmp_path / "first.log")
    logger = configure_logging()

    assert len(logger.handlers) == 1


def test_log_file_records_debug_even_when_quiet(tmp_path: Path, capsys) -> None:
    log_file = tmp_path / "logs" / "depguard.log"
    configure_logging(quiet=True, log_file=log_file)

    get_logger("engine").debug("evaluated %d manifests", 3)
    get_logger("cli").warning("config missing")
    for handler in logging.getLogger("depguard").handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG depguard.engine: evaluated 3 manifests" in text
    assert "WARNING depguard.cli: config missing" in text
    err = capsys.readouterr().err
    assert "config missing" in err
    assert "evaluated 3 manifests" not in err
