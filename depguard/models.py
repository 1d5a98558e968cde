"""Core data models shared across depguard components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple


class Severity(str, Enum):
    """Finding severity. Ordered Info < Warning < Error."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def level(self) -> int:
        return _SEVERITY_LEVELS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.level < other.level

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.level <= other.level

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.level > other.level

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.level >= other.level


_SEVERITY_LEVELS = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}


class Verdict(str, Enum):
    """Overall outcome of a run."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class DepKind(str, Enum):
    """Lifecycle category of a dependency declaration."""

    NORMAL = "normal"
    DEV = "dev"
    BUILD = "build"


def normalize_repo_path(value: str) -> str:
    """Return a canonical repo-relative path: forward slashes, no leading ``./``."""
    normalized = value.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized or "."


@dataclass(frozen=True)
class Location:
    """Source position of a declaration. Never part of a finding's identity."""

    path: str
    line: Optional[int] = None
    col: Optional[int] = None


@dataclass(frozen=True)
class Finding:
    """A single reported policy violation."""

    severity: Severity
    check_id: str
    code: str
    message: str
    location: Optional[Location] = None
    help: Optional[str] = None
    url: Optional[str] = None
    fingerprint: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DepSpec:
    """Declared constraint for a dependency.

    ``workspace=True`` means the declaration inherits from
    ``[workspace.dependencies]``; checks must not treat its version or path as
    independently declared.
    """

    version: Optional[str] = None
    path: Optional[str] = None
    workspace: bool = False
    git: Optional[str] = None
    branch: Optional[str] = None
    tag: Optional[str] = None
    rev: Optional[str] = None
    default_features: Optional[bool] = None
    optional: bool = False


@dataclass(frozen=True)
class DependencyDecl:
    """One declared dependency edge inside a manifest."""

    kind: DepKind
    name: str
    spec: DepSpec = field(default_factory=DepSpec)
    location: Optional[Location] = None
    # Platform filter from ``[target.<spec>.dependencies]`` tables.
    target: Optional[str] = None


@dataclass(frozen=True)
class PackageMeta:
    """The ``[package]`` table fields depguard cares about."""

    name: str
    publish: bool = True


@dataclass(frozen=True)
class WorkspaceDependency:
    """An entry of ``[workspace.dependencies]`` in the root manifest."""

    name: str
    version: Optional[str] = None
    path: Optional[str] = None
    workspace: bool = False


@dataclass(frozen=True)
class ManifestModel:
    """Normalized view of one package manifest."""

    path: str
    package: Optional[PackageMeta] = None
    dependencies: Sequence[DependencyDecl] = ()
    features: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def is_publishable(self) -> bool:
        return self.package is not None and self.package.publish

    def package_name(self) -> Optional[str]:
        return self.package.name if self.package is not None else None


@dataclass(frozen=True)
class WorkspaceModel:
    """Root aggregate handed to the engine. Built once per run."""

    repo_root: str = "."
    workspace_dependencies: Mapping[str, WorkspaceDependency] = field(default_factory=dict)
    manifests: Tuple[ManifestModel, ...] = ()

    def dependency_count(self) -> int:
        return sum(len(manifest.dependencies) for manifest in self.manifests)


__all__ = [
    "DepKind",
    "DepSpec",
    "DependencyDecl",
    "Finding",
    "Location",
    "ManifestModel",
    "PackageMeta",
    "Severity",
    "Verdict",
    "WorkspaceDependency",
    "WorkspaceModel",
    "normalize_repo_path",
]
