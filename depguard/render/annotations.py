"""GitHub Actions workflow-command annotations."""

from __future__ import annotations

from typing import List, Optional

from ..models import Finding, Severity
from ..report import ReportEnvelope

_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "notice",
}


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_annotation(finding: Finding) -> str:
    """Format one finding as ``::level file=P,line=L,col=C::[check:code] message``."""
    level = _LEVELS[finding.severity]
    properties: List[str] = []
    if finding.location is not None:
        properties.append(f"file={escape_property(finding.location.path)}")
        if finding.location.line is not None:
            properties.append(f"line={finding.location.line}")
        if finding.location.col is not None:
            properties.append(f"col={finding.location.col}")
    message = escape_data(f"[{finding.check_id or 'depguard'}:{finding.code}] {finding.message}")
    if properties:
        return f"::{level} {','.join(properties)}::{message}"
    return f"::{level}::{message}"


def render_annotations(report: ReportEnvelope, max_annotations: Optional[int] = None) -> List[str]:
    findings = report.findings
    if max_annotations is not None:
        findings = findings[:max_annotations]
    return [format_annotation(finding) for finding in findings]


__all__ = ["escape_data", "escape_property", "format_annotation", "render_annotations"]
