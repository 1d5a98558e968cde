"""Resolve raw configuration and caller overrides into an effective policy.

Resolution runs as four passes where later passes win:

1. ``_select_preset``: pick the preset named by the override or the config.
2. ``_apply_top_level``: scope, fail_on and max_findings from the config.
3. ``_apply_check_entries``: merge per-check entries into the preset.
4. ``_apply_overrides``: caller-supplied scope and max_findings.

Every value is validated before the next pass runs, so a partially resolved
configuration never escapes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional

from .config import (
    CheckConfig,
    DepguardConfig,
    InvalidFailOnError,
    InvalidGlobError,
    InvalidMaxFindingsError,
    InvalidScopeError,
    InvalidSeverityError,
)
from .globs import GlobError, validate_glob
from .logging import get_logger
from .models import Severity
from .policy import CheckPolicy, EffectiveConfig, FailOn, Scope
from .presets import preset

logger = get_logger("resolve")


@dataclass(frozen=True)
class Overrides:
    """Caller-supplied values (typically CLI flags) that beat the config file."""

    profile: Optional[str] = None
    scope: Optional[str] = None
    max_findings: Optional[int] = None


@dataclass(frozen=True)
class ResolvedConfig:
    effective: EffectiveConfig


def resolve_config(
    raw: Optional[DepguardConfig] = None, overrides: Optional[Overrides] = None
) -> ResolvedConfig:
    """Resolve ``raw`` and ``overrides`` into a :class:`ResolvedConfig`.

    Raises a :class:`~depguard.config.ConfigError` subclass naming the
    offending field or check.
    """
    raw = raw or DepguardConfig()
    overrides = overrides or Overrides()

    effective = _select_preset(raw, overrides)
    effective = _apply_top_level(effective, raw)
    effective = _apply_check_entries(effective, raw.checks)
    effective = _apply_overrides(effective, overrides)
    logger.debug(
        "Resolved profile=%s scope=%s fail_on=%s max_findings=%d",
        effective.profile,
        effective.scope.value,
        effective.fail_on.value,
        effective.max_findings,
    )
    return ResolvedConfig(effective=effective)


def _select_preset(raw: DepguardConfig, overrides: Overrides) -> EffectiveConfig:
    return preset(overrides.profile or raw.profile)


def _apply_top_level(config: EffectiveConfig, raw: DepguardConfig) -> EffectiveConfig:
    if raw.scope is not None:
        config = replace(config, scope=parse_scope(raw.scope))
    if raw.fail_on is not None:
        config = replace(config, fail_on=parse_fail_on(raw.fail_on))
    if raw.max_findings is not None:
        config = replace(config, max_findings=parse_max_findings(raw.max_findings))
    return config


def _apply_check_entries(
    config: EffectiveConfig, entries: Dict[str, CheckConfig]
) -> EffectiveConfig:
    if not entries:
        return config
    checks = dict(config.checks)
    for check_id, entry in entries.items():
        policy = checks.get(check_id, CheckPolicy.disabled())
        if entry.enabled is not None:
            policy = replace(policy, enabled=entry.enabled)
        if entry.severity is not None:
            policy = replace(policy, severity=parse_severity(entry.severity, check_id))
        if entry.allow:
            validate_allowlist(check_id, entry.allow)
            policy = replace(policy, allow=tuple(entry.allow))
        if entry.ignore_publish_false is not None:
            policy = replace(policy, ignore_publish_false=entry.ignore_publish_false)
        checks[check_id] = policy
    return replace(config, checks=checks)


def _apply_overrides(config: EffectiveConfig, overrides: Overrides) -> EffectiveConfig:
    if overrides.scope is not None:
        config = replace(config, scope=parse_scope(overrides.scope))
    if overrides.max_findings is not None:
        config = replace(config, max_findings=parse_max_findings(overrides.max_findings))
    return config


def parse_scope(value: str) -> Scope:
    try:
        return Scope(value)
    except ValueError as exc:
        raise InvalidScopeError(value) from exc


def parse_severity(value: str, check_id: str = "<unknown>") -> Severity:
    token = "warning" if value == "warn" else value
    try:
        return Severity(token)
    except ValueError as exc:
        raise InvalidSeverityError(check_id, value) from exc


def parse_fail_on(value: str) -> FailOn:
    token = "warning" if value == "warn" else value
    try:
        return FailOn(token)
    except ValueError as exc:
        raise InvalidFailOnError(value) from exc


def parse_max_findings(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidMaxFindingsError(value)
    return value


def validate_allowlist(check_id: str, patterns) -> None:
    for pattern in patterns:
        try:
            validate_glob(pattern)
        except GlobError as exc:
            raise InvalidGlobError(check_id, pattern, exc.reason) from exc


__all__ = [
    "Overrides",
    "ResolvedConfig",
    "parse_fail_on",
    "parse_max_findings",
    "parse_scope",
    "parse_severity",
    "resolve_config",
    "validate_allowlist",
]
