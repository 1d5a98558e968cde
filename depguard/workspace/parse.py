"""Cargo manifest parsing into the workspace model."""

from __future__ import annotations

import re
import tomllib
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..models import (
    DependencyDecl,
    DepKind,
    DepSpec,
    Location,
    ManifestModel,
    PackageMeta,
    WorkspaceDependency,
    normalize_repo_path,
)


class ManifestError(RuntimeError):
    """Raised when a manifest cannot be read or parsed."""


_DEPENDENCY_SECTIONS: Tuple[Tuple[str, DepKind], ...] = (
    ("dependencies", DepKind.NORMAL),
    ("dev-dependencies", DepKind.DEV),
    ("dev_dependencies", DepKind.DEV),
    ("build-dependencies", DepKind.BUILD),
    ("build_dependencies", DepKind.BUILD),
)

_HEADER_RE = re.compile(r"^\s*\[\s*([^\[\]]+?)\s*\]\s*(?:#.*)?$")
_KEY_RE = re.compile(r"""^\s*((?:"[^"]*"|'[^']*'|[A-Za-z0-9_.\- ]+?))\s*=""")


def parse_root_manifest(
    manifest_path: str, text: str
) -> Tuple[Dict[str, WorkspaceDependency], ManifestModel]:
    """Parse the root manifest, returning shared dependencies and the manifest."""
    doc = _load(manifest_path, text)
    workspace_deps: Dict[str, WorkspaceDependency] = {}
    workspace = doc.get("workspace")
    shared = workspace.get("dependencies") if isinstance(workspace, dict) else None
    if isinstance(shared, dict):
        for name, item in shared.items():
            spec = parse_spec(item)
            workspace_deps[name] = WorkspaceDependency(
                name=name,
                version=spec.version,
                path=spec.path,
                workspace=spec.workspace,
            )
    return workspace_deps, _manifest_from_doc(manifest_path, doc, text)


def parse_member_manifest(manifest_path: str, text: str) -> ManifestModel:
    """Parse a member manifest."""
    return _manifest_from_doc(manifest_path, _load(manifest_path, text), text)


def parse_spec(item: Any) -> DepSpec:
    """Convert a dependency value (string or table) into a :class:`DepSpec`."""
    if isinstance(item, str):
        return DepSpec(version=item)
    if not isinstance(item, dict):
        return DepSpec()
    default_features = item.get("default-features", item.get("default_features"))
    return DepSpec(
        version=_opt_str(item.get("version")),
        path=_opt_str(item.get("path")),
        workspace=item.get("workspace") is True,
        git=_opt_str(item.get("git")),
        branch=_opt_str(item.get("branch")),
        tag=_opt_str(item.get("tag")),
        rev=_opt_str(item.get("rev")),
        default_features=default_features if isinstance(default_features, bool) else None,
        optional=item.get("optional") is True,
    )


def _load(manifest_path: str, text: str) -> Dict[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(f"Failed to parse {manifest_path}: {exc}") from exc


def _manifest_from_doc(manifest_path: str, doc: Mapping[str, Any], text: str) -> ManifestModel:
    path = normalize_repo_path(manifest_path)
    locator = _LineLocator(text)

    dependencies: List[DependencyDecl] = []
    for section, kind in _DEPENDENCY_SECTIONS:
        dependencies.extend(
            _parse_dep_table(doc.get(section), kind, path, locator, (section,), None)
        )

    targets = doc.get("target")
    if isinstance(targets, dict):
        for target, tables in targets.items():
            if not isinstance(tables, dict):
                continue
            for section, kind in _DEPENDENCY_SECTIONS:
                dependencies.extend(
                    _parse_dep_table(
                        tables.get(section),
                        kind,
                        path,
                        locator,
                        ("target", target, section),
                        target,
                    )
                )

    return ManifestModel(
        path=path,
        package=_parse_package(doc.get("package")),
        dependencies=tuple(dependencies),
        features=_parse_features(doc.get("features")),
    )


def _parse_package(table: Any) -> Optional[PackageMeta]:
    if not isinstance(table, dict):
        return None
    name = table.get("name")
    if not isinstance(name, str):
        return None
    publish = table.get("publish")
    if isinstance(publish, bool):
        publishable = publish
    elif isinstance(publish, list):
        publishable = bool(publish)
    else:
        publishable = True
    return PackageMeta(name=name, publish=publishable)


def _parse_features(table: Any) -> Dict[str, Tuple[str, ...]]:
    if not isinstance(table, dict):
        return {}
    features: Dict[str, Tuple[str, ...]] = {}
    for name, tokens in table.items():
        if isinstance(tokens, list):
            features[name] = tuple(token for token in tokens if isinstance(token, str))
    return features


def _parse_dep_table(
    table: Any,
    kind: DepKind,
    manifest_path: str,
    locator: "_LineLocator",
    section_path: Tuple[str, ...],
    target: Optional[str],
) -> List[DependencyDecl]:
    if not isinstance(table, dict):
        return []
    decls: List[DependencyDecl] = []
    for name, item in table.items():
        decls.append(
            DependencyDecl(
                kind=kind,
                name=name,
                spec=parse_spec(item),
                location=Location(path=manifest_path, line=locator.line_for(section_path, name)),
                target=target,
            )
        )
    return decls


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class _LineLocator:
    """Find the 1-based line of a key declared under a table header.

    This is a textual scan rather than a full TOML parser; it covers
    ``name = ...`` entries, dotted keys such as ``name.workspace = true`` and
    ``[section.name]`` sub-tables.
    """

    def __init__(self, text: str) -> None:
        self._keys: Dict[Tuple[Tuple[str, ...], str], int] = {}
        self._tables: Dict[Tuple[str, ...], int] = {}
        current: Tuple[str, ...] = ()
        for number, line in enumerate(text.splitlines(), start=1):
            if line.lstrip().startswith("[["):
                current = ("[[array]]",)
                continue
            header = _HEADER_RE.match(line)
            if header:
                current = split_dotted(header.group(1))
                self._tables.setdefault(current, number)
                continue
            key = _KEY_RE.match(line)
            if key:
                parts = split_dotted(key.group(1))
                if parts:
                    self._keys.setdefault((current, parts[0]), number)

    def line_for(self, section_path: Sequence[str], name: str) -> Optional[int]:
        section = tuple(section_path)
        line = self._keys.get((section, name))
        if line is None:
            line = self._tables.get(section + (name,))
        return line


def split_dotted(key: str) -> Tuple[str, ...]:
    """Split a TOML dotted key, honoring quoted segments."""
    parts: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    for char in key:
        if quote:
            if char == quote:
                quote = None
            else:
                current.append(char)
        elif char in "\"'":
            quote = char
        elif char == ".":
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return tuple(part for part in parts if part)


__all__ = [
    "ManifestError",
    "parse_member_manifest",
    "parse_root_manifest",
    "parse_spec",
    "split_dotted",
]
