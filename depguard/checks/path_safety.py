"""Flag path dependencies that are absolute or escape the repository root."""

from __future__ import annotations

import re
from typing import Iterator, Optional

from .. import ids
from ..fingerprint import fingerprint_for_dep
from ..models import DependencyDecl, Finding, ManifestModel, WorkspaceModel
from ..policy import CheckPolicy
from .base import Check
from .utils import build_allowlist, dependency_data

_SEGMENT_SPLIT = re.compile(r"[/\\]")


def is_absolute_path(path: str) -> bool:
    """True for ``/x``, ``\\x`` and drive-letter forms such as ``C:``."""
    if path.startswith(("/", "\\")):
        return True
    return len(path) >= 2 and path[1] == ":"


def manifest_dir_depth(manifest_path: str) -> int:
    """Number of directories between the repo root and the manifest."""
    parts = [part for part in _SEGMENT_SPLIT.split(manifest_path) if part not in ("", ".")]
    return max(len(parts) - 1, 0)


def escapes_repo_root(start_depth: int, rel_path: str) -> bool:
    depth = start_depth
    for segment in _SEGMENT_SPLIT.split(rel_path):
        if segment in ("", "."):
            continue
        if segment == "..":
            depth -= 1
            if depth < 0:
                return True
        else:
            depth += 1
    return False


class PathSafetyCheck(Check):
    check_id = ids.CHECK_DEPS_PATH_SAFETY

    def inspect(self, model: WorkspaceModel, policy: CheckPolicy) -> Iterator[Finding]:
        allow = build_allowlist(policy)
        for manifest in model.manifests:
            depth = manifest_dir_depth(manifest.path)
            for dep in manifest.dependencies:
                path = dep.spec.path
                if path is None or allow.matches(path):
                    continue
                finding = self._classify(policy, manifest, dep, path, depth)
                if finding is not None:
                    yield finding

    def _classify(
        self,
        policy: CheckPolicy,
        manifest: ManifestModel,
        dep: DependencyDecl,
        path: str,
        depth: int,
    ) -> Optional[Finding]:
        if is_absolute_path(path):
            code = ids.CODE_ABSOLUTE_PATH
            message = f"dependency '{dep.name}' uses an absolute path: {path}"
            help_text = (
                "Use repo-relative paths. Absolute paths are not portable and may leak host layout."
            )
        elif escapes_repo_root(depth, path):
            code = ids.CODE_PARENT_ESCAPE
            message = f"dependency '{dep.name}' uses a path that escapes the repo root: {path}"
            help_text = "Avoid `..` segments that escape the repository root."
        else:
            return None
        return Finding(
            severity=policy.severity,
            check_id=self.check_id,
            code=code,
            message=message,
            location=dep.location,
            help=help_text,
            fingerprint=fingerprint_for_dep(self.check_id, code, manifest.path, dep.name, path),
            data=dependency_data(manifest, dep, path=path),
        )
