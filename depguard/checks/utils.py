"""Shared helper utilities for check implementations."""

from __future__ import annotations

from typing import Any, Dict

from ..globs import Allowlist
from ..models import DependencyDecl, DepKind, DepSpec, ManifestModel
from ..policy import CheckPolicy

_SECTION_NAMES = {
    DepKind.NORMAL: "dependencies",
    DepKind.DEV: "dev-dependencies",
    DepKind.BUILD: "build-dependencies",
}


def section_name(kind: DepKind) -> str:
    """Return the manifest table name for ``kind``."""
    return _SECTION_NAMES[kind]


def spec_to_dict(spec: DepSpec) -> Dict[str, Any]:
    """Render the declared fields of ``spec`` using manifest key names."""
    rendered: Dict[str, Any] = {}
    if spec.version is not None:
        rendered["version"] = spec.version
    if spec.path is not None:
        rendered["path"] = spec.path
    if spec.workspace:
        rendered["workspace"] = True
    if spec.git is not None:
        rendered["git"] = spec.git
    if spec.branch is not None:
        rendered["branch"] = spec.branch
    if spec.tag is not None:
        rendered["tag"] = spec.tag
    if spec.rev is not None:
        rendered["rev"] = spec.rev
    if spec.default_features is not None:
        rendered["default-features"] = spec.default_features
    if spec.optional:
        rendered["optional"] = True
    return rendered


def dependency_data(
    manifest: ManifestModel, dep: DependencyDecl, **extra: Any
) -> Dict[str, Any]:
    """Build the ``data`` payload shared by per-dependency findings."""
    data: Dict[str, Any] = {
        "dependency": dep.name,
        "manifest": manifest.path,
        "section": section_name(dep.kind),
    }
    if dep.target is not None:
        data["target"] = dep.target
    for key, value in extra.items():
        if value is not None:
            data[key] = value
    return dict(sorted(data.items()))


def build_allowlist(policy: CheckPolicy) -> Allowlist:
    return Allowlist.from_patterns(policy.allow)


__all__ = ["build_allowlist", "dependency_data", "section_name", "spec_to_dict"]
