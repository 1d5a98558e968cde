"""Tests for glob validation and matching."""

from __future__ import annotations

import pytest

from depguard.globs import Allowlist, GlobError, path_glob_match, validate_glob


@pytest.mark.parametrize(
    "pattern",
    ["serde", "serde*", "tokio-?", "[a-c]*", "{serde,tokio}", "crates/**", "**/lib", r"lit\*"],
)
def test_validate_glob_accepts_valid_patterns(pattern: str) -> None:
    validate_glob(pattern)


@pytest.mark.parametrize(
    ("pattern", "reason"),
    [
        ("abc[", "unclosed character class"),
        ("{a,b", "unclosed alternation group"),
        ("a,b}", "unopened alternation group"),
        ("{a,{b,c}}", "nested alternation"),
        ("trailing\\", "dangling escape"),
        ("a**", "whole path component"),
    ],
)
def test_validate_glob_rejects_invalid_patterns(pattern: str, reason: str) -> None:
    with pytest.raises(GlobError) as excinfo:
        validate_glob(pattern)

    assert reason in excinfo.value.reason


def test_allowlist_is_case_sensitive() -> None:
    assert Allowlist.from_patterns(["serde*"]).matches("serde_json")
    assert not Allowlist.from_patterns(["serde*"]).matches("Serde")


def test_allowlist_expands_alternatives() -> None:
    assert Allowlist.from_patterns(["{serde,tokio}-*"]).matches("tokio-util")
    assert not Allowlist.from_patterns(["{serde,tokio}-*"]).matches("rand-core")


def test_allowlist_escaped_star_is_literal() -> None:
    assert Allowlist.from_patterns([r"a\*"]).matches("a*")
    assert not Allowlist.from_patterns([r"a\*"]).matches("abc")


def test_path_glob_match_single_star_stays_in_component() -> None:
    assert path_Allowlist.from_patterns(["crates/*"]).matches("crates/core")
    assert not path_Allowlist.from_patterns(["crates/*"]).matches("crates/core/nested")


def test_path_glob_match_double_star_spans_components() -> None:
    assert path_Allowlist.from_patterns(["crates/**"]).matches("crates/core/nested")
    assert path_Allowlist.from_patterns(["**/Cargo.toml"]).matches("Cargo.toml")


def test_allowlist_matches_any_pattern() -> None:
    allow = Allowlist.from_patterns(["serde*", "{rand,tokio}"])

    assert allow
    assert allow.matches("serde_derive")
    assert allow.matches("tokio")
    assert not allow.matches("rand_core")


def test_empty_allowlist_matches_nothing() -> None:
    allow = Allowlist.from_patterns([])

    assert not allow
    assert not allow.matches("anything")


@pytest.mark.parametrize(
    ("pattern", "value"),
    [
        ("**/vendor", "vendor"),
        ("**/vendor", "third_party/vendor"),
        ("crates/**/Cargo.toml", "crates/Cargo.toml"),
        ("crates/**/Cargo.toml", "crates/core/Cargo.toml"),
    ],
)
def test_leading_double_star_matches_zero_directories(pattern: str, value: str) -> None:
    assert Allowlist.from_patterns([pattern]).matches(value)


def test_double_star_prefix_still_requires_component_boundary() -> None:
    allow = Allowlist.from_patterns(["**/vendor"])

    assert not allow.matches("myvendor")
    assert not allow.matches("vendor/extra")
