"""Configuration loading for depguard (.depguard.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import yaml

CONFIG_FILENAME = ".depguard.yml"


class ConfigError(RuntimeError):
    """Raised when configuration cannot be parsed or resolved."""

    field: Optional[str] = None


class InvalidScopeError(ConfigError):
    """Raised for a scope token outside the supported set."""

    field = "scope"

    def __init__(self, value: str) -> None:
        super().__init__(f"unknown scope: {value} (expected 'repo' or 'diff')")
        self.value = value


class InvalidFailOnError(ConfigError):
    """Raised for a fail_on token outside the supported set."""

    field = "fail_on"

    def __init__(self, value: str) -> None:
        super().__init__(f"unknown fail_on: {value} (expected error|warning)")
        self.value = value


class InvalidMaxFindingsError(ConfigError):
    """Raised when max_findings is not a non-negative integer."""

    field = "max_findings"

    def __init__(self, value: object) -> None:
        super().__init__(f"invalid max_findings: {value!r} (expected a non-negative integer)")
        self.value = value


class InvalidSeverityError(ConfigError):
    """Raised for a per-check severity outside info|warning|error."""

    field = "severity"

    def __init__(self, check_id: str, value: str) -> None:
        super().__init__(
            f"invalid severity for {check_id}: {value} (expected info|warning|error)"
        )
        self.check_id = check_id
        self.value = value


class InvalidGlobError(ConfigError):
    """Raised when a per-check allow pattern is not a valid glob."""

    field = "allow"

    def __init__(self, check_id: str, pattern: str, reason: str) -> None:
        super().__init__(f"invalid allow glob for {check_id}: {pattern} ({reason})")
        self.check_id = check_id
        self.pattern = pattern
        self.reason = reason


class InvalidValueTypeError(ConfigError):
    """Raised when a setting is present but has the wrong type."""

    def __init__(
        self, field_name: str, expected: str, value: object, *, check_id: Optional[str] = None
    ) -> None:
        where = f"{field_name} for {check_id}" if check_id else field_name
        super().__init__(f"invalid {where}: expected {expected}, got {value!r}")
        self.field = field_name
        self.check_id = check_id
        self.value = value


@dataclass
class CheckConfig:
    """User-supplied overrides for a single check."""

    enabled: Optional[bool] = None
    severity: Optional[str] = None
    allow: List[str] = field(default_factory=list)
    ignore_publish_false: Optional[bool] = None


@dataclass
class DepguardConfig:
    """Represents the settings defined in .depguard.yml."""

    schema: Optional[str] = None
    profile: Optional[str] = None
    scope: Optional[str] = None
    fail_on: Optional[str] = None
    max_findings: Optional[int] = None
    checks: Dict[str, CheckConfig] = field(default_factory=dict)


def load_config(config_path: Path) -> DepguardConfig:
    """Load configuration from disk. A missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return DepguardConfig()
    try:
        text = config_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {config_file}: {exc}") from exc
    return parse_config(text, source=config_file.name)


def parse_config(text: str, *, source: str = CONFIG_FILENAME) -> DepguardConfig:
    """Parse YAML text into a :class:`DepguardConfig`."""
    if not text.strip():
        return DepguardConfig()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {source}: {exc}") from exc
    if data is None:
        return DepguardConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source} must contain a mapping at the root")
    return config_from_mapping(data)


def config_from_mapping(data: Mapping[str, Any]) -> DepguardConfig:
    """Build a config from an already-decoded mapping.

    Values of the wrong type raise the matching :class:`ConfigError`
    subclass instead of falling back to defaults.
    """
    checks: Dict[str, CheckConfig] = {}
    raw_checks = data.get("checks")
    if raw_checks is not None and not isinstance(raw_checks, dict):
        raise ConfigError("'checks' must be a mapping of check id to settings")
    for check_id, raw in (raw_checks or {}).items():
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(f"settings for {check_id} must be a mapping")
        checks[str(check_id)] = _check_config(str(check_id), raw)

    max_findings_raw = data.get("max_findings")
    max_findings = None
    if max_findings_raw is not None:
        max_findings = _as_int(max_findings_raw)
        if max_findings is None:
            raise InvalidMaxFindingsError(max_findings_raw)

    return DepguardConfig(
        schema=_typed_str(
            data.get("schema"), lambda value: InvalidValueTypeError("schema", "a string", value)
        ),
        profile=_typed_str(
            data.get("profile"), lambda value: InvalidValueTypeError("profile", "a string", value)
        ),
        scope=_typed_str(data.get("scope"), lambda value: InvalidScopeError(repr(value))),
        fail_on=_typed_str(data.get("fail_on"), lambda value: InvalidFailOnError(repr(value))),
        max_findings=max_findings,
        checks=checks,
    )


def _check_config(check_id: str, raw: Mapping[str, Any]) -> CheckConfig:
    return CheckConfig(
        enabled=_typed_bool(raw.get("enabled"), "enabled", check_id),
        severity=_typed_str(
            raw.get("severity"), lambda value: InvalidSeverityError(check_id, repr(value))
        ),
        allow=_allow_patterns(check_id, raw.get("allow")),
        ignore_publish_false=_typed_bool(
            raw.get("ignore_publish_false"), "ignore_publish_false", check_id
        ),
    )


def _typed_str(value: Any, error: Callable[[Any], ConfigError]) -> Optional[str]:
    if value is None:
        return None
    coerced = _as_str(value)
    if coerced is None:
        raise error(value)
    return coerced


def _typed_bool(value: Any, field_name: str, check_id: str) -> Optional[bool]:
    if value is None:
        return None
    coerced = _as_bool(value)
    if coerced is None:
        raise InvalidValueTypeError(field_name, "a boolean", value, check_id=check_id)
    return coerced


def _allow_patterns(check_id: str, value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise InvalidValueTypeError(
            "allow", "a glob or a list of globs", value, check_id=check_id
        )
    patterns: List[str] = []
    for item in value:
        if not isinstance(item, str):
            raise InvalidGlobError(check_id, repr(item), "pattern must be a string")
        patterns.append(item)
    return patterns


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILENAME",
    "CheckConfig",
    "ConfigError",
    "DepguardConfig",
    "InvalidFailOnError",
    "InvalidGlobError",
    "InvalidMaxFindingsError",
    "InvalidScopeError",
    "InvalidSeverityError",
    "InvalidValueTypeError",
    "config_from_mapping",
    "load_config",
    "parse_config",
]
