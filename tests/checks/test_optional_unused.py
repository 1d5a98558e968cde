"""Tests for deps.optional_unused."""

from __future__ import annotations

from depguard import ids
from depguard.checks import OptionalUnusedCheck
from depguard.checks.optional_unused import referenced_names
from tests._fixtures.factories import dep, manifest, only, workspace

CHECK = OptionalUnusedCheck()
CONFIG = only(ids.CHECK_DEPS_OPTIONAL_UNUSED)


def test_referenced_names_handles_all_token_forms() -> None:
    tokens = ["dep:serde", "tokio/rt", "rand?/std", "log", "std"]

    assert referenced_names(tokens) == {"serde", "tokio", "rand", "log", "std"}


def test_flags_optional_dependency_missing_from_features() -> None:
    model = workspace(
        manifest(
            deps=[
                dep("serde", version="1", optional=True),
                dep("tokio", version="1", optional=True),
                dep("rand", version="0.8", optional=True),
                dep("log", version="0.4"),
            ],
            features={"default": ["std"], "full": ["dep:serde", "rand?/std"]},
        )
    )

    (finding,) = CHECK.run(model, CONFIG)

    assert finding.message == "optional dependency 'tokio' is not referenced in any feature"
    assert finding.data["dependency"] == "tokio"


def test_features_are_scoped_per_manifest() -> None:
    model = workspace(
        manifest("crates/a/Cargo.toml", [], features={"s": ["dep:serde"]}),
        manifest("crates/b/Cargo.toml", [dep("serde", version="1", optional=True)]),
    )

    (finding,) = CHECK.run(model, CONFIG)

    assert finding.data["manifest"] == "crates/b/Cargo.toml"
