"""Evaluation engine: run checks, order, bound and summarize findings."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .checks import Check, default_checks
from .logging import get_logger
from .models import Finding, Severity, Verdict, WorkspaceModel
from .policy import EffectiveConfig, FailOn

logger = get_logger("engine")

_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


@dataclass(frozen=True)
class SeverityCounts:
    info: int = 0
    warning: int = 0
    error: int = 0

    @classmethod
    def tally(cls, findings: Iterable[Finding]) -> "SeverityCounts":
        info = warning = error = 0
        for finding in findings:
            if finding.severity is Severity.ERROR:
                error += 1
            elif finding.severity is Severity.WARNING:
                warning += 1
            else:
                info += 1
        return cls(info=info, warning=warning, error=error)


@dataclass(frozen=True)
class ScanData:
    """Run statistics carried alongside the findings."""

    scope: str
    profile: str
    manifests_scanned: int
    dependencies_scanned: int
    findings_total: int
    findings_emitted: int
    truncated_reason: Optional[str] = None


@dataclass(frozen=True)
class DomainReport:
    verdict: Verdict
    findings: Tuple[Finding, ...]
    counts: SeverityCounts
    data: ScanData


def finding_sort_key(finding: Finding) -> Tuple[int, bool, str, bool, int, str, str, str]:
    """Total order: severity, path, line, check id, code, message.

    Findings without a location, or without a line, sort after located ones.
    """
    location = finding.location
    path = location.path if location is not None else None
    line = location.line if location is not None else None
    return (
        _SEVERITY_RANK[finding.severity],
        path is None,
        path or "",
        line is None,
        line or 0,
        finding.check_id,
        finding.code,
        finding.message,
    )


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    return sorted(findings, key=finding_sort_key)


def compute_verdict(findings: Sequence[Finding], fail_on: FailOn) -> Verdict:
    """Fail on any error; warnings fail only under ``fail_on=warning``."""
    if any(finding.severity is Severity.ERROR for finding in findings):
        return Verdict.FAIL
    if any(finding.severity is Severity.WARNING for finding in findings):
        return Verdict.FAIL if fail_on is FailOn.WARNING else Verdict.WARN
    return Verdict.PASS


def truncation_reason(max_findings: int) -> str:
    return f"findings truncated to max_findings={max_findings}"


def evaluate(
    model: WorkspaceModel,
    config: EffectiveConfig,
    *,
    checks: Optional[Sequence[Check]] = None,
    max_workers: Optional[int] = None,
) -> DomainReport:
    """Evaluate ``model`` under ``config`` and return the bounded report.

    The verdict and severity counts cover the emitted findings only, so a
    truncated report is judged on what it shows.
    """
    registered = tuple(checks) if checks is not None else default_checks()
    findings = sort_findings(_run_checks(registered, model, config, max_workers))

    findings_total = len(findings)
    truncated_reason = None
    if findings_total > config.max_findings:
        findings = findings[: config.max_findings]
        truncated_reason = truncation_reason(config.max_findings)
        logger.info(
            "Truncated %d findings to max_findings=%d", findings_total, config.max_findings
        )

    verdict = compute_verdict(findings, config.fail_on)
    data = ScanData(
        scope=config.scope.value,
        profile=config.profile,
        manifests_scanned=len(model.manifests),
        dependencies_scanned=model.dependency_count(),
        findings_total=findings_total,
        findings_emitted=len(findings),
        truncated_reason=truncated_reason,
    )
    logger.debug(
        "Evaluated %d manifests (%d dependencies): %d findings, verdict=%s",
        data.manifests_scanned,
        data.dependencies_scanned,
        findings_total,
        verdict.value,
    )
    return DomainReport(
        verdict=verdict,
        findings=tuple(findings),
        counts=SeverityCounts.tally(findings),
        data=data,
    )


def _run_checks(
    checks: Sequence[Check],
    model: WorkspaceModel,
    config: EffectiveConfig,
    max_workers: Optional[int],
) -> List[Finding]:
    if max_workers is not None and max_workers > 1 and len(checks) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(check.run, model, config) for check in checks]
            batches = [future.result() for future in futures]
    else:
        batches = [check.run(model, config) for check in checks]

    merged: List[Finding] = []
    for check, batch in zip(checks, batches):
        logger.debug("Check %s produced %d findings", check.check_id, len(batch))
        merged.extend(batch)
    return merged


__all__ = [
    "DomainReport",
    "ScanData",
    "SeverityCounts",
    "compute_verdict",
    "evaluate",
    "finding_sort_key",
    "sort_findings",
    "truncation_reason",
]
