"""Tests for deps.default_features_explicit."""

from __future__ import annotations

from depguard import ids
from depguard.checks import DefaultFeaturesExplicitCheck
from tests._fixtures.factories import dep, manifest, only, workspace

CHECK = DefaultFeaturesExplicitCheck()
CONFIG = only(ids.CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT)


def test_flags_inline_options_without_default_features() -> None:
    model = workspace(
        manifest(
            deps=[
                dep("pathy", path="../p", version="1"),
                dep("gitty", git="https://example.com/g"),
                dep("opt", version="1", optional=True),
                dep("plain", version="1"),
                dep("explicit", path="../e", default_features=False),
                dep("inherited", workspace=True, optional=True),
            ]
        )
    )

    findings = CHECK.run(model, CONFIG)

    assert [f.data["dependency"] for f in findings] == ["pathy", "gitty", "opt"]
    assert findings[0].message == (
        "dependency 'pathy' has inline options but no explicit default-features declaration"
    )
