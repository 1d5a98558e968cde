from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.workspace_builder import WorkspaceBuilder


@pytest.fixture
def workspace_builder(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a reusable workspace builder rooted at the pytest tmp_path."""
    return WorkspaceBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_depguard_logger():
    """Drop handlers the CLI installs so they never outlive a captured stream."""
    yield
    logger = logging.getLogger("depguard")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
