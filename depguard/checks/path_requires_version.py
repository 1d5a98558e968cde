"""Require an explicit version next to ``path = ...`` in publishable crates."""

from __future__ import annotations

from typing import Iterator

from .. import ids
from ..fingerprint import fingerprint_for_dep
from ..models import Finding, WorkspaceModel
from ..policy import CheckPolicy
from .base import Check
from .utils import build_allowlist, dependency_data, spec_to_dict


class PathRequiresVersionCheck(Check):
    check_id = ids.CHECK_DEPS_PATH_REQUIRES_VERSION

    def inspect(self, model: WorkspaceModel, policy: CheckPolicy) -> Iterator[Finding]:
        allow = build_allowlist(policy)
        for manifest in model.manifests:
            if not policy.ignore_publish_false and not manifest.is_publishable():
                continue
            for dep in manifest.dependencies:
                spec = dep.spec
                if spec.path is None or spec.version is not None or spec.workspace:
                    continue
                if allow.matches(dep.name):
                    continue
                yield Finding(
                    severity=policy.severity,
                    check_id=self.check_id,
                    code=ids.CODE_PATH_WITHOUT_VERSION,
                    message=(
                        f"dependency '{dep.name}' uses a path dependency without an explicit version"
                    ),
                    location=dep.location,
                    help=(
                        "Add an explicit version alongside `path = ...`, or use "
                        "`workspace = true` with a workspace dependency."
                    ),
                    fingerprint=fingerprint_for_dep(
                        self.check_id,
                        ids.CODE_PATH_WITHOUT_VERSION,
                        manifest.path,
                        dep.name,
                        spec.path,
                    ),
                    data=dependency_data(
                        manifest,
                        dep,
                        path=spec.path,
                        current_spec=spec_to_dict(spec),
                        fix_action=ids.FIX_ACTION_ADD_VERSION,
                        fix_hint="Add a version alongside the path dependency",
                    ),
                )
