"""Report envelope: the JSON document written by ``depguard check``.

Two schemas are supported. ``depguard.report.v1`` carries a flat verdict
string and ``warning`` severities; ``depguard.report.v2`` carries a verdict
object with per-severity counts and names the middle severity ``warn``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from . import __version__
from .engine import DomainReport, ScanData, SeverityCounts
from .logging import get_logger
from .models import Finding, Location, Severity, Verdict

SCHEMA_REPORT_V1 = "depguard.report.v1"
SCHEMA_REPORT_V2 = "depguard.report.v2"
REPORT_VERSIONS = {"v1": SCHEMA_REPORT_V1, "v2": SCHEMA_REPORT_V2}
DEFAULT_REPORT_VERSION = "v2"

TOOL_NAME = "depguard"

_EXIT_CODES = {Verdict.PASS: 0, Verdict.WARN: 1, Verdict.FAIL: 2}

logger = get_logger("report")


class ReportError(RuntimeError):
    """Raised when a report cannot be parsed or written."""


@dataclass(frozen=True)
class ToolMeta:
    name: str = TOOL_NAME
    version: str = __version__


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ReportEnvelope:
    """A complete run result ready for serialization."""

    schema: str
    verdict: Verdict
    findings: Tuple[Finding, ...]
    data: ScanData
    counts: SeverityCounts = field(default_factory=SeverityCounts)
    reasons: Tuple[str, ...] = ()
    tool: ToolMeta = field(default_factory=ToolMeta)
    started_at: datetime = field(default_factory=utc_now)
    finished_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_domain(
        cls,
        report: DomainReport,
        *,
        version: str = DEFAULT_REPORT_VERSION,
        started_at: Optional[datetime] = None,
        finished_at: Optional[datetime] = None,
    ) -> "ReportEnvelope":
        now = utc_now()
        return cls(
            schema=schema_for_version(version),
            verdict=report.verdict,
            findings=tuple(report.findings),
            data=report.data,
            counts=report.counts,
            started_at=started_at or now,
            finished_at=finished_at or now,
        )

    @property
    def is_v2(self) -> bool:
        return self.schema == SCHEMA_REPORT_V2

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "schema": self.schema,
            "tool": {"name": self.tool.name, "version": self.tool.version},
            "started_at": _format_timestamp(self.started_at),
            "finished_at": _format_timestamp(self.finished_at),
            "findings": [_finding_to_dict(finding, v2=self.is_v2) for finding in self.findings],
            "data": _scan_data_to_dict(self.data),
        }
        if self.is_v2:
            payload["verdict"] = {
                "status": self.verdict.value,
                "counts": {
                    "info": self.counts.info,
                    "warn": self.counts.warning,
                    "error": self.counts.error,
                },
                "reasons": list(self.reasons),
            }
        else:
            payload["verdict"] = self.verdict.value
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ReportEnvelope":
        schema = payload.get("schema")
        verdict_raw = payload.get("verdict")
        if schema not in (SCHEMA_REPORT_V1, SCHEMA_REPORT_V2):
            # Unlabelled documents are recognised by their verdict shape.
            if isinstance(verdict_raw, dict):
                schema = SCHEMA_REPORT_V2
            elif isinstance(verdict_raw, str):
                schema = SCHEMA_REPORT_V1
            else:
                raise ReportError(f"unknown report schema: {schema}")

        try:
            raw_findings = payload.get("findings") or []
            if not isinstance(raw_findings, list):
                raise ReportError(f"malformed {schema} report: findings must be a list")
            findings = tuple(
                _finding_from_dict(_as_mapping(item, "finding")) for item in raw_findings
            )
            reasons: Tuple[str, ...] = ()
            if isinstance(verdict_raw, dict):
                verdict = Verdict(verdict_raw["status"])
                reasons = tuple(str(reason) for reason in verdict_raw.get("reasons") or [])
            else:
                verdict = Verdict(verdict_raw)
            tool_raw = _as_mapping(payload.get("tool"), "tool")
            return cls(
                schema=schema,
                verdict=verdict,
                findings=findings,
                data=_scan_data_from_dict(_as_mapping(payload.get("data"), "data")),
                counts=SeverityCounts.tally(findings),
                reasons=reasons,
                tool=ToolMeta(
                    name=str(tool_raw.get("name", TOOL_NAME)),
                    version=str(tool_raw.get("version", "")),
                ),
                started_at=_parse_timestamp(payload.get("started_at")),
                finished_at=_parse_timestamp(payload.get("finished_at")),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ReportError(f"malformed {schema} report: {exc}") from exc

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=True) + "\n"


def schema_for_version(version: str) -> str:
    try:
        return REPORT_VERSIONS[version]
    except KeyError as exc:
        expected = ", ".join(sorted(REPORT_VERSIONS))
        raise ReportError(f"unknown report version: {version} (expected {expected})") from exc


def parse_report(text: str) -> ReportEnvelope:
    """Parse JSON text of either schema."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ReportError(f"Failed to parse report JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ReportError("report JSON must be an object")
    return ReportEnvelope.from_dict(payload)


def read_report(path: Path) -> ReportEnvelope:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ReportError(f"Failed to read report {path}: {exc}") from exc
    return parse_report(text)


def write_report(path: Path, envelope: ReportEnvelope) -> Path:
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(envelope.to_json(), encoding="utf-8")
    except OSError as exc:
        raise ReportError(f"Failed to write report {target}: {exc}") from exc
    logger.info("Wrote %s report to %s", envelope.schema, target)
    return target


def verdict_exit_code(verdict: Verdict) -> int:
    """Pass -> 0, Warn -> 1, Fail -> 2."""
    return _EXIT_CODES[verdict]


# ----------------------------------------------------------------------
# Serialization helpers


def _finding_to_dict(finding: Finding, *, v2: bool) -> Dict[str, Any]:
    severity = finding.severity.value
    if v2 and finding.severity is Severity.WARNING:
        severity = "warn"
    payload: Dict[str, Any] = {
        "severity": severity,
        "check_id": finding.check_id,
        "code": finding.code,
        "message": finding.message,
    }
    if finding.location is not None:
        location: Dict[str, Any] = {"path": finding.location.path}
        if finding.location.line is not None:
            location["line"] = finding.location.line
        if finding.location.col is not None:
            location["col"] = finding.location.col
        payload["location"] = location
    for key in ("help", "url", "fingerprint"):
        value = getattr(finding, key)
        if value is not None:
            payload[key] = value
    if finding.data:
        payload["data"] = dict(finding.data)
    return payload


def _finding_from_dict(payload: Mapping[str, Any]) -> Finding:
    severity = payload["severity"]
    if severity == "warn":
        severity = "warning"
    location = None
    location_raw = payload.get("location")
    if location_raw is not None:
        location_raw = _as_mapping(location_raw, "location")
        location = Location(
            path=str(location_raw["path"]),
            line=location_raw.get("line"),
            col=location_raw.get("col"),
        )
    data = payload.get("data")
    return Finding(
        severity=Severity(severity),
        check_id=str(payload["check_id"]),
        code=str(payload["code"]),
        message=str(payload["message"]),
        location=location,
        help=payload.get("help"),
        url=payload.get("url"),
        fingerprint=payload.get("fingerprint"),
        data=dict(data) if isinstance(data, dict) else {},
    )


def _scan_data_to_dict(data: ScanData) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "scope": data.scope,
        "profile": data.profile,
        "manifests_scanned": data.manifests_scanned,
        "dependencies_scanned": data.dependencies_scanned,
        "findings_total": data.findings_total,
        "findings_emitted": data.findings_emitted,
    }
    if data.truncated_reason is not None:
        payload["truncated_reason"] = data.truncated_reason
    return payload


def _as_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _scan_data_from_dict(payload: Mapping[str, Any]) -> ScanData:
    return ScanData(
        scope=str(payload.get("scope", "repo")),
        profile=str(payload.get("profile", "unknown")),
        manifests_scanned=int(payload.get("manifests_scanned", 0)),
        dependencies_scanned=int(payload.get("dependencies_scanned", 0)),
        findings_total=int(payload.get("findings_total", 0)),
        findings_emitted=int(payload.get("findings_emitted", 0)),
        truncated_reason=payload.get("truncated_reason"),
    )


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str):
        return utc_now()
    return datetime.fromisoformat(value)


__all__ = [
    "DEFAULT_REPORT_VERSION",
    "REPORT_VERSIONS",
    "ReportEnvelope",
    "ReportError",
    "SCHEMA_REPORT_V1",
    "SCHEMA_REPORT_V2",
    "ToolMeta",
    "parse_report",
    "read_report",
    "schema_for_version",
    "verdict_exit_code",
    "write_report",
]
