"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from depguard.cli import _build_parser, main

WILDCARD_CRATE = {
    "Cargo.toml": """
        [package]
        name = "app"

        [dependencies]
        serde = "*"
    """,
}


def _check(repo: Path, out: Path, *extra: str, globals_: tuple[str, ...] = ()) -> int:
    return main(["--repo-root", str(repo), *globals_, "check", "--report-out", str(out), *extra])


def test_cli_accepts_verbose_before_command() -> None:
    args = _build_parser().parse_args(["--verbose", "explain", "deps.no_wildcards"])
    assert args.verbose is True
    assert args.command == "explain"


def test_cli_accepts_verbose_after_command() -> None:
    args = _build_parser().parse_args(["check", "--verbose"])
    assert args.verbose is True
    assert args.command == "check"


def test_global_logging_options(tmp_path: Path) -> None:
    args = _build_parser().parse_args(
        ["-q", "--log-file", str(tmp_path / "run.log"), "explain", "deps.no_wildcards"]
    )
    assert args.quiet is True
    assert args.log_file == tmp_path / "run.log"


def test_check_writes_debug_log_file(workspace_builder, tmp_path: Path) -> None:
    workspace_builder.write(WILDCARD_CRATE)
    log_file = tmp_path / "logs" / "run.log"

    report = tmp_path / "report.json"
    _check(workspace_builder.path(), report, globals_=("--log-file", str(log_file)))

    text = log_file.read_text(encoding="utf-8")
    assert "depguard.orchestrator: Starting check run" in text
    assert "depguard.engine: Evaluated 1 manifests" in text


def test_check_defaults() -> None:
    args = _build_parser().parse_args(["check"])
    assert args.report_out == Path("artifacts/depguard/report.json")
    assert args.report_version == "v2"
    assert args.mode == "standard"
    assert args.write_markdown is False


def test_check_rejects_unknown_report_version() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["check", "--report-version", "v3"])


def test_check_exit_code_follows_verdict(workspace_builder, tmp_path: Path) -> None:
    workspace_builder.write(WILDCARD_CRATE)
    out = tmp_path / "out" / "report.json"

    assert _check(workspace_builder.path(), out) == 2
    assert _check(workspace_builder.path(), out, globals_=("--profile", "compat")) == 1
    assert _check(workspace_builder.path(), out, globals_=("--profile", "warn")) == 2

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["schema"] == "depguard.report.v2"
    assert payload["verdict"]["status"] == "fail"
    assert payload["data"]["profile"] == "warn"


def test_check_passes_on_clean_workspace(workspace_builder, tmp_path: Path) -> None:
    workspace_builder.write({"Cargo.toml": '[package]\nname = "app"\n\n[dependencies]\nserde = "1"\n'})

    assert _check(workspace_builder.path(), tmp_path / "report.json") == 0


def test_cockpit_mode_exits_zero(workspace_builder, tmp_path: Path) -> None:
    workspace_builder.write(WILDCARD_CRATE)
    out = tmp_path / "report.json"

    assert _check(workspace_builder.path(), out, "--mode", "cockpit") == 0
    assert json.loads(out.read_text(encoding="utf-8"))["verdict"]["status"] == "fail"


def test_check_writes_v1_report_and_markdown(workspace_builder, tmp_path: Path) -> None:
    workspace_builder.write(WILDCARD_CRATE)
    out = tmp_path / "report.json"
    md = tmp_path / "comment.md"

    code = _check(
        workspace_builder.path(),
        out,
        "--report-version",
        "v1",
        "--write-markdown",
        "--markdown-out",
        str(md),
    )

    assert code == 2
    assert json.loads(out.read_text(encoding="utf-8"))["verdict"] == "fail"
    assert "- Verdict: **FAIL**" in md.read_text(encoding="utf-8")


def test_runtime_error_produces_failing_report(workspace_builder, tmp_path: Path) -> None:
    workspace_builder.write({**WILDCARD_CRATE, ".depguard.yml": "fail_on: sometimes\n"})
    out = tmp_path / "report.json"

    assert _check(workspace_builder.path(), out) == 2

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["verdict"]["reasons"] == ["tool_error"]
    (finding,) = payload["findings"]
    assert finding["check_id"] == "tool.runtime"
    assert finding["code"] == "runtime_error"
    assert "sometimes" in finding["message"]


def test_diff_scope_without_revisions_is_a_runtime_error(workspace_builder, tmp_path: Path) -> None:
    workspace_builder.write(WILDCARD_CRATE)
    out = tmp_path / "report.json"

    assert _check(workspace_builder.path(), out, globals_=("--scope", "diff")) == 2
    assert json.loads(out.read_text(encoding="utf-8"))["findings"][0]["code"] == "runtime_error"


def test_unwritable_report_exits_one(workspace_builder, tmp_path: Path) -> None:
    workspace_builder.write(WILDCARD_CRATE)
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        _check(workspace_builder.path(), blocker / "report.json")

    assert excinfo.value.code == 1


def test_md_renders_existing_report(workspace_builder, tmp_path: Path, capsys) -> None:
    workspace_builder.write(WILDCARD_CRATE)
    out = tmp_path / "report.json"
    _check(workspace_builder.path(), out)
    capsys.readouterr()

    assert main(["md", "--report", str(out)]) == 0

    stdout = capsys.readouterr().out
    assert stdout.startswith("# Depguard report")
    assert "`deps.no_wildcards` / `wildcard_version`" in stdout


def test_md_writes_output_file(workspace_builder, tmp_path: Path) -> None:
    workspace_builder.write(WILDCARD_CRATE)
    out = tmp_path / "report.json"
    _check(workspace_builder.path(), out)
    target = tmp_path / "nested" / "comment.md"

    assert main(["md", "--report", str(out), "-o", str(target)]) == 0
    assert target.read_text(encoding="utf-8").startswith("# Depguard report")


def test_md_missing_report_exits_one(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["md", "--report", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 1


@pytest.mark.parametrize("command", ["md", "annotations"])
@pytest.mark.parametrize("field", ["tool", "data"])
def test_report_commands_exit_one_on_wrong_typed_fields(
    tmp_path: Path, command: str, field: str
) -> None:
    report = tmp_path / "report.json"
    report.write_text(
        json.dumps({"schema": "depguard.report.v1", "verdict": "pass", field: "oops"}),
        encoding="utf-8",
    )

    with pytest.raises(SystemExit) as excinfo:
        main([command, "--report", str(report)])

    assert excinfo.value.code == 1


def test_annotations_respects_max(workspace_builder, tmp_path: Path, capsys) -> None:
    workspace_builder.write(
        {
            "Cargo.toml": """
                [package]
                name = "app"

                [dependencies]
                serde = "*"
                tokio = "1.*"
                rand = "0.*"
            """,
        }
    )
    out = tmp_path / "report.json"
    _check(workspace_builder.path(), out)
    capsys.readouterr()

    assert main(["annotations", "--report", str(out), "--max", "2"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("::error file=Cargo.toml,line=5::[deps.no_wildcards:wildcard_version]")


def test_explain_known_identifier(capsys) -> None:
    assert main(["explain", "wildcard_version"]) == 0

    assert capsys.readouterr().out.startswith("Wildcard Version\n")


def test_explain_unknown_identifier(capsys) -> None:
    assert main(["explain", "deps.nope"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Unknown check_id or code: deps.nope" in captured.err
