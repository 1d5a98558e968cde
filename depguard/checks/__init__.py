"""Check implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Sequence, Set, Tuple

from .base import Check
from .default_features_explicit import DefaultFeaturesExplicitCheck
from .dev_only_in_normal import DevOnlyInNormalCheck
from .git_requires_version import GitRequiresVersionCheck
from .no_multiple_versions import NoMultipleVersionsCheck
from .no_wildcards import NoWildcardsCheck
from .optional_unused import OptionalUnusedCheck
from .path_requires_version import PathRequiresVersionCheck
from .path_safety import PathSafetyCheck
from .workspace_inheritance import WorkspaceInheritanceCheck

_ENTRY_POINT_GROUP = "depguard.checks"

# Registration order is the order findings are produced before sorting.
_BUILTIN_FACTORIES: Tuple[Callable[[], Check], ...] = (
    NoWildcardsCheck,
    PathRequiresVersionCheck,
    PathSafetyCheck,
    WorkspaceInheritanceCheck,
    GitRequiresVersionCheck,
    DevOnlyInNormalCheck,
    DefaultFeaturesExplicitCheck,
    NoMultipleVersionsCheck,
    OptionalUnusedCheck,
)


def default_checks() -> Tuple[Check, ...]:
    """Return fresh instances of the built-in checks in registration order."""
    return tuple(factory() for factory in _BUILTIN_FACTORIES)


def discover_checks(enabled: Sequence[str] | None = None) -> List[Check]:
    """Return built-in checks plus entry-point plugins, honoring optional ids."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = set(enabled)

    checks: List[Check] = []
    seen: Set[str] = set()

    def _add(instance: Check) -> None:
        check_id = instance.check_id
        if not check_id:
            raise TypeError(f"{type(instance).__name__} does not define a check_id")
        if enabled_set is not None and check_id not in enabled_set:
            return
        if check_id in seen:
            return
        checks.append(instance)
        seen.add(check_id)

    for instance in default_checks():
        _add(instance)

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load check entry point '{entry.name}': {exc}") from exc
        _add(_coerce_check(loaded))

    if enabled_set is not None:
        missing = enabled_set - seen
        if missing:
            raise ValueError(f"Unknown checks requested: {', '.join(sorted(missing))}")

    return checks


def _coerce_check(obj: object) -> Check:
    if isinstance(obj, Check):
        return obj
    if isinstance(obj, type) and issubclass(obj, Check):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Check):
            return instance
    raise TypeError("Check entry point must be a Check subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "Check",
    "DefaultFeaturesExplicitCheck",
    "DevOnlyInNormalCheck",
    "GitRequiresVersionCheck",
    "NoMultipleVersionsCheck",
    "NoWildcardsCheck",
    "OptionalUnusedCheck",
    "PathRequiresVersionCheck",
    "PathSafetyCheck",
    "WorkspaceInheritanceCheck",
    "default_checks",
    "discover_checks",
]
