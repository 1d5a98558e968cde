"""Helper utilities for constructing temporary Cargo workspaces in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping, Optional

from depguard.models import WorkspaceModel
from depguard.workspace import ScopeInput, build_workspace_model


class WorkspaceBuilder:
    """Utility for writing manifests into a throwaway repository and parsing it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def model(self, scope_input: Optional[ScopeInput] = None) -> WorkspaceModel:
        """Return a freshly parsed workspace model."""
        return build_workspace_model(self.root, scope_input)

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root


__all__ = ["WorkspaceBuilder"]
