"""Workspace discovery and manifest parsing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from ..logging import get_logger
from ..models import WorkspaceModel, normalize_repo_path
from .discover import ROOT_MANIFEST, discover_manifests
from .parse import ManifestError, parse_member_manifest, parse_root_manifest, parse_spec

logger = get_logger("workspace")


@dataclass(frozen=True)
class ScopeInput:
    """Manifests to include. ``changed_files`` is set only for diff scope."""

    changed_files: Optional[Sequence[str]] = None

    @classmethod
    def repo(cls) -> "ScopeInput":
        return cls()

    @classmethod
    def diff(cls, changed_files: Sequence[str]) -> "ScopeInput":
        return cls(changed_files=tuple(changed_files))

    @property
    def is_diff(self) -> bool:
        return self.changed_files is not None


def build_workspace_model(
    repo_root: Path, scope_input: Optional[ScopeInput] = None
) -> WorkspaceModel:
    """Discover, scope and parse the manifests under ``repo_root``.

    The root manifest is always parsed so shared dependency definitions are
    available even when a diff touches only member manifests.
    """
    root = Path(repo_root)
    scope_input = scope_input or ScopeInput.repo()
    manifests = discover_manifests(root)

    root_text = _read(root, ROOT_MANIFEST)
    workspace_deps, root_model = parse_root_manifest(ROOT_MANIFEST, root_text)

    in_scope = [path for path in manifests if path != ROOT_MANIFEST]
    if scope_input.is_diff:
        changed = {normalize_repo_path(path) for path in scope_input.changed_files or ()}
        in_scope = [path for path in in_scope if path in changed]
        logger.info(
            "Diff scope: %d of %d member manifests changed", len(in_scope), len(manifests) - 1
        )

    parsed = [root_model]
    for rel_path in in_scope:
        parsed.append(parse_member_manifest(rel_path, _read(root, rel_path)))

    return WorkspaceModel(
        repo_root=root.as_posix(),
        workspace_dependencies=workspace_deps,
        manifests=tuple(parsed),
    )


def _read(root: Path, rel_path: str) -> str:
    path = root / rel_path
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Failed to read {path}: {exc}") from exc


__all__ = [
    "ManifestError",
    "ROOT_MANIFEST",
    "ScopeInput",
    "build_workspace_model",
    "discover_manifests",
    "parse_member_manifest",
    "parse_root_manifest",
    "parse_spec",
]
