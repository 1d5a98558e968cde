"""Flag version requirements that contain a wildcard."""

from __future__ import annotations

from typing import Iterator

from .. import ids
from ..fingerprint import fingerprint_for_dep
from ..models import Finding, WorkspaceModel
from ..policy import CheckPolicy
from .base import Check
from .utils import build_allowlist, dependency_data, spec_to_dict


class NoWildcardsCheck(Check):
    check_id = ids.CHECK_DEPS_NO_WILDCARDS

    def inspect(self, model: WorkspaceModel, policy: CheckPolicy) -> Iterator[Finding]:
        allow = build_allowlist(policy)
        for manifest in model.manifests:
            for dep in manifest.dependencies:
                version = dep.spec.version
                if version is None or "*" not in version:
                    continue
                if allow.matches(dep.name):
                    continue
                yield Finding(
                    severity=policy.severity,
                    check_id=self.check_id,
                    code=ids.CODE_WILDCARD_VERSION,
                    message=f"dependency '{dep.name}' uses a wildcard version: {version}",
                    location=dep.location,
                    help="Replace wildcard versions with an explicit semver requirement.",
                    fingerprint=fingerprint_for_dep(
                        self.check_id,
                        ids.CODE_WILDCARD_VERSION,
                        manifest.path,
                        dep.name,
                        dep.spec.path,
                    ),
                    data=dependency_data(
                        manifest,
                        dep,
                        current_spec=spec_to_dict(dep.spec),
                        fix_action=ids.FIX_ACTION_PIN_VERSION,
                        fix_hint="Pin to a specific semver requirement",
                    ),
                )
