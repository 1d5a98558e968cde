"""Tests for deps.git_requires_version."""

from __future__ import annotations

from depguard import ids
from depguard.checks import GitRequiresVersionCheck
from depguard.fingerprint import fingerprint_for_dep
from tests._fixtures.factories import dep, manifest, only, workspace

CHECK = GitRequiresVersionCheck()
CONFIG = only(ids.CHECK_DEPS_GIT_REQUIRES_VERSION)
URL = "https://github.com/org/lib"


def test_flags_git_dependency_without_version() -> None:
    model = workspace(
        manifest(
            deps=[
                dep("lib", git=URL, branch="main"),
                dep("pinned", git=URL, version="0.3"),
                dep("shared", workspace=True),
            ]
        )
    )

    (finding,) = CHECK.run(model, CONFIG)

    assert finding.message == "dependency 'lib' uses a git dependency without an explicit version"
    assert finding.data["current_spec"] == {"git": URL, "branch": "main"}
    assert finding.data["fix_action"] == ids.FIX_ACTION_ADD_VERSION_WITH_GIT
    assert finding.fingerprint == fingerprint_for_dep(
        ids.CHECK_DEPS_GIT_REQUIRES_VERSION, ids.CODE_GIT_WITHOUT_VERSION, "Cargo.toml", "lib", URL
    )


def test_skips_unpublished_crates_unless_ignored() -> None:
    model = workspace(manifest(deps=[dep("lib", git=URL)], publish=False))

    assert CHECK.run(model, CONFIG) == []
    ignoring = only(ids.CHECK_DEPS_GIT_REQUIRES_VERSION, ignore_publish_false=True)
    assert len(CHECK.run(model, ignoring)) == 1
