"""Require ``workspace = true`` for crates defined in ``[workspace.dependencies]``."""

from __future__ import annotations

from typing import Iterator

from .. import ids
from ..fingerprint import fingerprint_for_dep
from ..models import Finding, WorkspaceModel
from ..policy import CheckPolicy
from .base import Check
from .utils import build_allowlist, dependency_data, spec_to_dict


class WorkspaceInheritanceCheck(Check):
    check_id = ids.CHECK_DEPS_WORKSPACE_INHERITANCE

    def inspect(self, model: WorkspaceModel, policy: CheckPolicy) -> Iterator[Finding]:
        if not model.workspace_dependencies:
            return
        allow = build_allowlist(policy)
        for manifest in model.manifests:
            for dep in manifest.dependencies:
                if dep.name not in model.workspace_dependencies or dep.spec.workspace:
                    continue
                if allow.matches(dep.name):
                    continue
                yield Finding(
                    severity=policy.severity,
                    check_id=self.check_id,
                    code=ids.CODE_MISSING_WORKSPACE_TRUE,
                    message=(
                        f"dependency '{dep.name}' exists in [workspace.dependencies] "
                        "but is not declared with `workspace = true`"
                    ),
                    location=dep.location,
                    help=(
                        "Prefer `workspace = true` to inherit the workspace dependency "
                        "version and features."
                    ),
                    fingerprint=fingerprint_for_dep(
                        self.check_id,
                        ids.CODE_MISSING_WORKSPACE_TRUE,
                        manifest.path,
                        dep.name,
                        dep.spec.path,
                    ),
                    data=dependency_data(
                        manifest,
                        dep,
                        current_spec=spec_to_dict(dep.spec),
                        fix_action=ids.FIX_ACTION_USE_WORKSPACE,
                        fix_hint="Replace the inline spec with `workspace = true`",
                    ),
                )
