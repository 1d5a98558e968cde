"""Workspace member discovery."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Iterator, List, Sequence

from ..globs import GlobError, path_glob_match
from ..logging import get_logger
from .parse import ManifestError

ROOT_MANIFEST = "Cargo.toml"

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    ".venv",
    "target",
    "node_modules",
    "__pycache__",
}

logger = get_logger("workspace.discover")


def discover_manifests(repo_root: Path) -> List[str]:
    """Return repo-relative manifest paths, root first then sorted members.

    Without a ``[workspace]`` table the repository is a single crate and only
    the root manifest is returned.
    """
    root = Path(repo_root)
    root_manifest = root / ROOT_MANIFEST
    try:
        text = root_manifest.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Failed to read {root_manifest}: {exc}") from exc
    try:
        doc = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(f"Failed to parse root {ROOT_MANIFEST}: {exc}") from exc

    workspace = doc.get("workspace")
    if not isinstance(workspace, dict):
        return [ROOT_MANIFEST]

    members = _string_list(workspace.get("members"))
    excludes = _string_list(workspace.get("exclude"))

    found = set()
    for rel_path in _iter_manifests(root):
        if rel_path == ROOT_MANIFEST:
            continue
        rel_dir = rel_path.rsplit("/", 1)[0]
        is_member = not members or _matches_any(members, rel_path, rel_dir)
        if is_member and not _matches_any(excludes, rel_path, rel_dir):
            found.add(rel_path)

    manifests = [ROOT_MANIFEST, *sorted(found)]
    logger.debug("Discovered %d manifests", len(manifests))
    return manifests


def _iter_manifests(root: Path) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        if ROOT_MANIFEST in filenames:
            rel = (Path(dirpath) / ROOT_MANIFEST).relative_to(root).as_posix()
            yield rel


def _matches_any(patterns: Sequence[str], rel_path: str, rel_dir: str) -> bool:
    for pattern in patterns:
        try:
            if path_glob_match(pattern, rel_dir) or path_glob_match(pattern, rel_path):
                return True
        except GlobError as exc:
            raise ManifestError(f"Invalid workspace glob {pattern!r}: {exc.reason}") from exc
    return False


def _string_list(value: object) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


__all__ = ["ROOT_MANIFEST", "discover_manifests"]
