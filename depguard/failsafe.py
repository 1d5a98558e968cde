"""Fail-safe reports for runs that cannot evaluate the workspace."""

from __future__ import annotations

from .engine import ScanData, SeverityCounts
from .fingerprint import fingerprint_for_dep
from .ids import CHECK_TOOL_RUNTIME, CODE_RUNTIME_ERROR, WORKSPACE_MANIFEST
from .models import Finding, Severity, Verdict
from .report import DEFAULT_REPORT_VERSION, ReportEnvelope, schema_for_version

RUNTIME_ERROR_REASON = "tool_error"
RUNTIME_ERROR_HELP = "Fix the tool error and re-run depguard."


def empty_report(
    scope: str, profile: str, *, version: str = DEFAULT_REPORT_VERSION
) -> ReportEnvelope:
    """Return a passing report with no findings (no root manifest present)."""
    return ReportEnvelope(
        schema=schema_for_version(version),
        verdict=Verdict.PASS,
        findings=(),
        data=ScanData(
            scope=scope,
            profile=profile,
            manifests_scanned=0,
            dependencies_scanned=0,
            findings_total=0,
            findings_emitted=0,
        ),
    )


def runtime_error_report(
    message: str, *, version: str = DEFAULT_REPORT_VERSION
) -> ReportEnvelope:
    """Return a failing report carrying ``message`` as a single error finding."""
    finding = Finding(
        severity=Severity.ERROR,
        check_id=CHECK_TOOL_RUNTIME,
        code=CODE_RUNTIME_ERROR,
        message=message,
        help=RUNTIME_ERROR_HELP,
        fingerprint=fingerprint_for_dep(
            CHECK_TOOL_RUNTIME, CODE_RUNTIME_ERROR, WORKSPACE_MANIFEST, ""
        ),
    )
    return ReportEnvelope(
        schema=schema_for_version(version),
        verdict=Verdict.FAIL,
        findings=(finding,),
        data=ScanData(
            scope="repo",
            profile="unknown",
            manifests_scanned=0,
            dependencies_scanned=0,
            findings_total=1,
            findings_emitted=1,
        ),
        counts=SeverityCounts(error=1),
        reasons=(RUNTIME_ERROR_REASON,),
    )


__all__ = ["RUNTIME_ERROR_HELP", "empty_report", "runtime_error_report"]
