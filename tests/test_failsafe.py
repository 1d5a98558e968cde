"""Tests for fail-safe reports."""

from __future__ import annotations

from depguard import ids
from depguard.failsafe import RUNTIME_ERROR_HELP, empty_report, runtime_error_report
from depguard.fingerprint import fingerprint_for_dep
from depguard.models import Severity, Verdict
from depguard.report import SCHEMA_REPORT_V1, SCHEMA_REPORT_V2


def test_empty_report_passes() -> None:
    report = empty_report("diff", "warn")

    assert report.schema == SCHEMA_REPORT_V2
    assert report.verdict is Verdict.PASS
    assert report.findings == ()
    assert report.data.scope == "diff"
    assert report.data.profile == "warn"
    assert report.data.manifests_scanned == 0


def test_runtime_error_report_fails_with_single_finding() -> None:
    report = runtime_error_report("boom")

    assert report.verdict is Verdict.FAIL
    (finding,) = report.findings
    assert finding.severity is Severity.ERROR
    assert finding.check_id == ids.CHECK_TOOL_RUNTIME
    assert finding.code == ids.CODE_RUNTIME_ERROR
    assert finding.message == "boom"
    assert finding.help == RUNTIME_ERROR_HELP
    assert finding.location is None
    assert finding.fingerprint == fingerprint_for_dep(
        ids.CHECK_TOOL_RUNTIME, ids.CODE_RUNTIME_ERROR, ids.WORKSPACE_MANIFEST, ""
    )
    assert report.counts.error == 1
    assert report.data.findings_total == report.data.findings_emitted == 1


def test_runtime_error_report_serializes_reasons() -> None:
    v2 = runtime_error_report("boom").to_dict()
    v1 = runtime_error_report("boom", version="v1").to_dict()

    assert v2["verdict"] == {
        "status": "fail",
        "counts": {"info": 0, "warn": 0, "error": 1},
        "reasons": ["tool_error"],
    }
    assert v1["schema"] == SCHEMA_REPORT_V1
    assert v1["verdict"] == "fail"
