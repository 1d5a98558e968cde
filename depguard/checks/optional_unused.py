"""Flag optional dependencies that no feature enables."""

from __future__ import annotations

from typing import Iterable, Iterator, Set

from .. import ids
from ..fingerprint import fingerprint_for_dep
from ..models import Finding, WorkspaceModel
from ..policy import CheckPolicy
from .base import Check
from .utils import build_allowlist, dependency_data


def referenced_names(tokens: Iterable[str]) -> Set[str]:
    """Dependency names a feature list can enable.

    Handles ``dep:NAME``, ``NAME/feature``, ``NAME?/feature`` and bare
    ``NAME`` (which may also be a feature name).
    """
    names: Set[str] = set()
    for token in tokens:
        if token.startswith("dep:"):
            names.add(token[len("dep:") :])
        elif "/" in token:
            names.add(token.split("/", 1)[0].rstrip("?"))
        else:
            names.add(token)
    return names


class OptionalUnusedCheck(Check):
    check_id = ids.CHECK_DEPS_OPTIONAL_UNUSED

    def inspect(self, model: WorkspaceModel, policy: CheckPolicy) -> Iterator[Finding]:
        allow = build_allowlist(policy)
        for manifest in model.manifests:
            referenced: Set[str] = set()
            for tokens in manifest.features.values():
                referenced |= referenced_names(tokens)
            for dep in manifest.dependencies:
                if not dep.spec.optional or dep.name in referenced:
                    continue
                if allow.matches(dep.name):
                    continue
                yield Finding(
                    severity=policy.severity,
                    check_id=self.check_id,
                    code=ids.CODE_OPTIONAL_NOT_IN_FEATURES,
                    message=f"optional dependency '{dep.name}' is not referenced in any feature",
                    location=dep.location,
                    help="Add a feature that enables this dependency, or remove `optional = true`.",
                    fingerprint=fingerprint_for_dep(
                        self.check_id, ids.CODE_OPTIONAL_NOT_IN_FEATURES, manifest.path, dep.name
                    ),
                    data=dependency_data(manifest, dep),
                )
