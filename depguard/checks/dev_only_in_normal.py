"""Flag test and benchmark crates declared as normal dependencies."""

from __future__ import annotations

from typing import Iterator

from .. import ids
from ..fingerprint import fingerprint_for_dep
from ..models import DepKind, Finding, WorkspaceModel
from ..policy import CheckPolicy
from .base import Check
from .utils import build_allowlist, dependency_data, spec_to_dict

DEV_ONLY_CRATES = frozenset(
    {
        # test frameworks
        "proptest",
        "quickcheck",
        "rstest",
        "test-case",
        "test-strategy",
        # mocking
        "mockall",
        "mockito",
        "wiremock",
        "httpmock",
        # snapshots
        "insta",
        "expect-test",
        # benchmarks
        "criterion",
        "divan",
        "iai",
        # test utilities
        "tempfile",
        "assert_cmd",
        "assert_fs",
        "predicates",
        "fake",
        "arbitrary",
        "cargo-llvm-cov",
    }
)


class DevOnlyInNormalCheck(Check):
    check_id = ids.CHECK_DEPS_DEV_ONLY_IN_NORMAL

    def inspect(self, model: WorkspaceModel, policy: CheckPolicy) -> Iterator[Finding]:
        allow = build_allowlist(policy)
        for manifest in model.manifests:
            for dep in manifest.dependencies:
                if dep.kind is not DepKind.NORMAL or dep.name not in DEV_ONLY_CRATES:
                    continue
                if allow.matches(dep.name):
                    continue
                yield Finding(
                    severity=policy.severity,
                    check_id=self.check_id,
                    code=ids.CODE_DEV_DEP_IN_NORMAL,
                    message=(
                        f"dependency '{dep.name}' is typically a dev-only crate "
                        "but appears in [dependencies]"
                    ),
                    location=dep.location,
                    help=(
                        "Move this dependency to [dev-dependencies] unless it's genuinely "
                        "needed in production code."
                    ),
                    fingerprint=fingerprint_for_dep(
                        self.check_id, ids.CODE_DEV_DEP_IN_NORMAL, manifest.path, dep.name
                    ),
                    data=dependency_data(
                        manifest,
                        dep,
                        current_spec=spec_to_dict(dep.spec),
                        fix_action=ids.FIX_ACTION_MOVE_TO_DEV,
                        fix_hint="Move to [dev-dependencies]",
                    ),
                )
