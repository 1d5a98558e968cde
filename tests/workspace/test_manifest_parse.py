"""Tests for Cargo manifest parsing."""

from __future__ import annotations

import pytest

from depguard.models import DepKind, DepSpec
from depguard.workspace import ManifestError, parse_member_manifest, parse_root_manifest, parse_spec
from depguard.workspace.parse import split_dotted

MEMBER = """\
[package]
name = "app"
version = "0.1.0"

[dependencies]
serde = "1.0"
tokio = { version = "1", features = ["rt"], default-features = false }
shared.workspace = true

[dependencies.local]
path = "../local"
optional = true

[dev_dependencies]
insta = "1"

[build-dependencies]
cc = { git = "https://github.com/rust-lang/cc-rs", tag = "1.0.0" }

[target.'cfg(windows)'.dependencies]
winapi = "0.3"

[features]
default = ["std"]
extras = ["dep:local", "tokio/full"]
"""


def test_parse_spec_accepts_strings_and_tables() -> None:
    assert parse_spec("1.2") == DepSpec(version="1.2")
    assert parse_spec({"workspace": True, "optional": True}) == DepSpec(
        workspace=True, optional=True
    )
    assert parse_spec({"path": "x", "default_features": True}) == DepSpec(
        path="x", default_features=True
    )
    assert parse_spec(42) == DepSpec()


def test_member_manifest_collects_every_section() -> None:
    model = parse_member_manifest("crates/app/Cargo.toml", MEMBER)

    by_name = {decl.name: decl for decl in model.dependencies}
    assert set(by_name) == {"serde", "tokio", "shared", "local", "insta", "cc", "winapi"}
    assert by_name["tokio"].spec.default_features is False
    assert by_name["shared"].spec.workspace is True
    assert by_name["local"].spec == DepSpec(path="../local", optional=True)
    assert by_name["insta"].kind is DepKind.DEV
    assert by_name["cc"].kind is DepKind.BUILD
    assert by_name["cc"].spec.tag == "1.0.0"
    assert by_name["winapi"].target == "cfg(windows)"
    assert by_name["winapi"].kind is DepKind.NORMAL


def test_member_manifest_records_declaration_lines() -> None:
    model = parse_member_manifest("crates/app/Cargo.toml", MEMBER)

    lines = {decl.name: decl.location.line for decl in model.dependencies}
    assert lines["serde"] == 6
    assert lines["tokio"] == 7
    assert lines["shared"] == 8
    assert lines["local"] == 10
    assert lines["insta"] == 15
    assert lines["cc"] == 18
    assert lines["winapi"] == 21
    assert {decl.location.path for decl in model.dependencies} == {"crates/app/Cargo.toml"}


def test_member_manifest_reads_package_and_features() -> None:
    model = parse_member_manifest("crates/app/Cargo.toml", MEMBER)

    assert model.package_name() == "app"
    assert model.is_publishable()
    assert model.features == {"default": ("std",), "extras": ("dep:local", "tokio/full")}


@pytest.mark.parametrize("publish", ["false", "[]"])
def test_publish_opt_out(publish: str) -> None:
    text = f'[package]\nname = "x"\npublish = {publish}\n'

    assert not parse_member_manifest("Cargo.toml", text).is_publishable()


def test_registry_list_keeps_crate_publishable() -> None:
    text = '[package]\nname = "x"\npublish = ["internal"]\n'

    assert parse_member_manifest("Cargo.toml", text).is_publishable()


def test_root_manifest_returns_shared_dependencies() -> None:
    text = """\
[workspace]
members = ["crates/*"]

[workspace.dependencies]
serde = "1.0"
local = { path = "crates/local" }
"""
    shared, root = parse_root_manifest("Cargo.toml", text)

    assert set(shared) == {"serde", "local"}
    assert shared["serde"].version == "1.0"
    assert shared["local"].path == "crates/local"
    assert root.package is None
    assert root.dependencies == ()


def test_normalizes_manifest_paths() -> None:
    model = parse_member_manifest(".\\crates\\a\\Cargo.toml", '[package]\nname = "a"\n')

    assert model.path == "crates/a/Cargo.toml"


def test_invalid_toml_raises_manifest_error() -> None:
    with pytest.raises(ManifestError, match="Cargo.toml"):
        parse_member_manifest("Cargo.toml", "[package\nname = 1")


@pytest.mark.parametrize(
    ("key", "parts"),
    [
        ("target.'cfg(unix)'.dependencies", ("target", "cfg(unix)", "dependencies")),
        ('serde.workspace', ("serde", "workspace")),
        ('"quoted.name"', ("quoted.name",)),
    ],
)
def test_split_dotted(key: str, parts) -> None:
    assert split_dotted(key) == parts
