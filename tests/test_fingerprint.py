"""Tests for finding fingerprints."""

from __future__ import annotations

import hashlib

import pytest

from depguard.fingerprint import fingerprint_for_dep


def test_fingerprint_is_sha256_of_pipe_joined_fields() -> None:
    expected = hashlib.sha256(
        b"deps.no_wildcards|wildcard_version|Cargo.toml|serde"
    ).hexdigest()

    assert fingerprint_for_dep("deps.no_wildcards", "wildcard_version", "Cargo.toml", "serde") == expected


def test_fingerprint_appends_extra_when_present() -> None:
    expected = hashlib.sha256(
        b"deps.path_safety|absolute_path|crates/a/Cargo.toml|lib|/abs/lib"
    ).hexdigest()

    actual = fingerprint_for_dep(
        "deps.path_safety", "absolute_path", "crates/a/Cargo.toml", "lib", "/abs/lib"
    )

    assert actual == expected


def test_fingerprint_is_lowercase_hex() -> None:
    value = fingerprint_for_dep("a", "b", "c", "d")

    assert len(value) == 64
    assert value == value.lower()
    int(value, 16)


def test_fingerprint_is_deterministic() -> None:
    first = fingerprint_for_dep("a", "b", "c", "d", "e")
    second = fingerprint_for_dep("a", "b", "c", "d", "e")

    assert first == second


@pytest.mark.parametrize(
    "changed",
    [
        ("x", "b", "c", "d", None),
        ("a", "x", "c", "d", None),
        ("a", "b", "x", "d", None),
        ("a", "b", "c", "x", None),
        ("a", "b", "c", "d", "x"),
    ],
)
def test_fingerprint_changes_with_any_field(changed) -> None:
    baseline = fingerprint_for_dep("a", "b", "c", "d")

    assert fingerprint_for_dep(*changed) != baseline
