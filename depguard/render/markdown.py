"""Markdown rendering of report envelopes."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader

from ..models import Finding, Severity
from ..report import ReportEnvelope

_TEMPLATES_DIR = Path(__file__).with_name("templates")
_TEMPLATE_NAME = "report.md.j2"

_SEVERITY_LABELS = {
    Severity.INFO: "INFO",
    Severity.WARNING: "WARN",
    Severity.ERROR: "ERROR",
}


def _create_env(templates_dir: Path | None = None) -> Environment:
    directories = [str(templates_dir)] if templates_dir else []
    directories.append(str(_TEMPLATES_DIR))
    return Environment(
        loader=FileSystemLoader(directories),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_markdown(report: ReportEnvelope, *, templates_dir: Path | None = None) -> str:
    """Render ``report`` as a Markdown summary suitable for a PR comment."""
    template = _create_env(templates_dir).get_template(_TEMPLATE_NAME)
    return template.render(
        verdict=report.verdict.value.upper(),
        findings_emitted=report.data.findings_emitted,
        findings_total=report.data.findings_total,
        truncated_reason=report.data.truncated_reason,
        findings=[_finding_context(finding) for finding in report.findings],
    )


def _finding_context(finding: Finding) -> Dict[str, Any]:
    where = ""
    location = finding.location
    if location is not None:
        where = f" (`{location.path}`:{location.line})" if location.line else f" (`{location.path}`)"
    return {
        "label": _SEVERITY_LABELS[finding.severity],
        "check_id": finding.check_id,
        "code": finding.code,
        "message": finding.message,
        "where": where,
        "help": finding.help,
        "url": finding.url,
    }


__all__ = ["render_markdown"]
