"""Built-in policy profiles."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from .ids import ALL_CHECK_IDS
from .logging import get_logger
from .models import Severity
from .policy import CheckPolicy, EffectiveConfig, FailOn, Scope

DEFAULT_PROFILE = "strict"
DEFAULT_MAX_FINDINGS = 200

logger = get_logger("presets")


def _default_checks(severity: Severity) -> Dict[str, CheckPolicy]:
    return {check_id: CheckPolicy.enabled_at(severity) for check_id in ALL_CHECK_IDS}


def strict_profile() -> EffectiveConfig:
    return EffectiveConfig(
        profile="strict",
        scope=Scope.REPO,
        fail_on=FailOn.ERROR,
        max_findings=DEFAULT_MAX_FINDINGS,
        checks=_default_checks(Severity.ERROR),
    )


def warn_profile() -> EffectiveConfig:
    return EffectiveConfig(
        profile="warn",
        scope=Scope.REPO,
        fail_on=FailOn.WARNING,
        max_findings=DEFAULT_MAX_FINDINGS,
        checks=_default_checks(Severity.WARNING),
    )


def compat_profile() -> EffectiveConfig:
    # Findings surface as warnings but only errors fail the run.
    return EffectiveConfig(
        profile="compat",
        scope=Scope.REPO,
        fail_on=FailOn.ERROR,
        max_findings=DEFAULT_MAX_FINDINGS,
        checks=_default_checks(Severity.WARNING),
    )


PRESETS: Dict[str, Callable[[], EffectiveConfig]] = {
    "strict": strict_profile,
    "warn": warn_profile,
    "compat": compat_profile,
}


def preset(profile: Optional[str]) -> EffectiveConfig:
    """Return a fresh preset for ``profile``; unknown names map to strict."""
    name = profile or DEFAULT_PROFILE
    factory = PRESETS.get(name)
    if factory is None:
        logger.warning("Unknown profile '%s'; falling back to '%s'", name, DEFAULT_PROFILE)
        factory = PRESETS[DEFAULT_PROFILE]
    return factory()


__all__ = [
    "DEFAULT_MAX_FINDINGS",
    "DEFAULT_PROFILE",
    "PRESETS",
    "compat_profile",
    "preset",
    "strict_profile",
    "warn_profile",
]
