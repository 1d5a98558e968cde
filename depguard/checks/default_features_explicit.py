"""Require an explicit ``default-features`` on dependencies with inline options."""

from __future__ import annotations

from typing import Iterator

from .. import ids
from ..fingerprint import fingerprint_for_dep
from ..models import DepSpec, Finding, WorkspaceModel
from ..policy import CheckPolicy
from .base import Check
from .utils import build_allowlist, dependency_data, spec_to_dict


def has_inline_options(spec: DepSpec) -> bool:
    return spec.path is not None or spec.git is not None or spec.optional


class DefaultFeaturesExplicitCheck(Check):
    check_id = ids.CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT

    def inspect(self, model: WorkspaceModel, policy: CheckPolicy) -> Iterator[Finding]:
        allow = build_allowlist(policy)
        for manifest in model.manifests:
            for dep in manifest.dependencies:
                spec = dep.spec
                if spec.workspace or not has_inline_options(spec):
                    continue
                if spec.default_features is not None:
                    continue
                if allow.matches(dep.name):
                    continue
                yield Finding(
                    severity=policy.severity,
                    check_id=self.check_id,
                    code=ids.CODE_DEFAULT_FEATURES_IMPLICIT,
                    message=(
                        f"dependency '{dep.name}' has inline options but no explicit "
                        "default-features declaration"
                    ),
                    location=dep.location,
                    help=(
                        "Add `default-features = true` or `default-features = false` "
                        "to make the intent explicit."
                    ),
                    fingerprint=fingerprint_for_dep(
                        self.check_id, ids.CODE_DEFAULT_FEATURES_IMPLICIT, manifest.path, dep.name
                    ),
                    data=dependency_data(manifest, dep, current_spec=spec_to_dict(spec)),
                )
