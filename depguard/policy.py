"""Resolved policy types consumed by checks and the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple

from .models import Severity


class Scope(str, Enum):
    """Whether a run covers the whole workspace or only changed manifests."""

    REPO = "repo"
    DIFF = "diff"


class FailOn(str, Enum):
    """Lowest severity that turns the verdict into a failure."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class CheckPolicy:
    """Per-check configuration."""

    enabled: bool = False
    severity: Severity = Severity.INFO
    allow: Tuple[str, ...] = ()
    # Only meaningful for the *_requires_version checks.
    ignore_publish_false: bool = False

    @classmethod
    def enabled_at(cls, severity: Severity) -> "CheckPolicy":
        return cls(enabled=True, severity=severity)

    @classmethod
    def disabled(cls) -> "CheckPolicy":
        return cls()


@dataclass(frozen=True)
class EffectiveConfig:
    """Fully resolved policy for one run."""

    profile: str
    scope: Scope = Scope.REPO
    fail_on: FailOn = FailOn.ERROR
    max_findings: int = 200
    checks: Mapping[str, CheckPolicy] = field(default_factory=dict)

    def check_policy(self, check_id: str) -> Optional[CheckPolicy]:
        """Return the policy for ``check_id`` when it exists and is enabled."""
        policy = self.checks.get(check_id)
        if policy is None or not policy.enabled:
            return None
        return policy


__all__ = ["CheckPolicy", "EffectiveConfig", "FailOn", "Scope"]
