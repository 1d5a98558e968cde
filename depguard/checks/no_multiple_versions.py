"""Flag crates declared with different versions across the workspace."""

from __future__ import annotations

from typing import Dict, Iterator, Set, Tuple

from .. import ids
from ..fingerprint import fingerprint_for_dep
from ..models import Finding, WorkspaceModel
from ..policy import CheckPolicy
from .base import Check
from .utils import build_allowlist


class NoMultipleVersionsCheck(Check):
    check_id = ids.CHECK_DEPS_NO_MULTIPLE_VERSIONS

    def inspect(self, model: WorkspaceModel, policy: CheckPolicy) -> Iterator[Finding]:
        allow = build_allowlist(policy)
        occurrences: Dict[str, Set[Tuple[str, str]]] = {}
        for manifest in model.manifests:
            for dep in manifest.dependencies:
                if dep.spec.workspace or dep.spec.version is None:
                    continue
                occurrences.setdefault(dep.name, set()).add((dep.spec.version, manifest.path))

        for name in sorted(occurrences):
            seen = sorted(occurrences[name])
            versions = sorted({version for version, _ in seen})
            if len(versions) <= 1 or allow.matches(name):
                continue
            yield Finding(
                severity=policy.severity,
                check_id=self.check_id,
                code=ids.CODE_DUPLICATE_DIFFERENT_VERSIONS,
                message=(
                    f"crate '{name}' has multiple versions across workspace: "
                    f"{', '.join(versions)}"
                ),
                location=None,
                help=(
                    "Align all workspace members to use the same version via "
                    "[workspace.dependencies]."
                ),
                fingerprint=fingerprint_for_dep(
                    self.check_id,
                    ids.CODE_DUPLICATE_DIFFERENT_VERSIONS,
                    ids.WORKSPACE_MANIFEST,
                    name,
                ),
                data={
                    "crate": name,
                    "manifest": ids.WORKSPACE_MANIFEST,
                    "occurrences": [
                        {"manifest": manifest_path, "version": version}
                        for version, manifest_path in seen
                    ],
                    "versions": versions,
                },
            )
