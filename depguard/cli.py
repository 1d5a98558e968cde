"""CLI entrypoints for depguard commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .explain import format_explanation, format_not_found, lookup_explanation
from .failsafe import runtime_error_report
from .git.diff import GitDiffError
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator
from .render import render_annotations, render_markdown
from .report import (
    DEFAULT_REPORT_VERSION,
    REPORT_VERSIONS,
    ReportEnvelope,
    ReportError,
    read_report,
    verdict_exit_code,
    write_report,
)
from .resolve import Overrides
from .workspace import ManifestError

DEFAULT_REPORT_PATH = Path("artifacts/depguard/report.json")
DEFAULT_MARKDOWN_PATH = Path("artifacts/depguard/comment.md")

# Failures raised before evaluation; reported as a runtime-error report.
_UPSTREAM_ERRORS = (ConfigError, ManifestError, GitDiffError, ReportError, OSError)

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_report_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--report",
        type=Path,
        default=DEFAULT_REPORT_PATH,
        help="Path to the JSON report file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depguard",
        description="Dependency policy guard for Cargo workspaces.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors to stderr.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a full debug log to this file.",
    )
    parser.add_argument(
        "--repo-root",
        type=Path,
        default=Path("."),
        help="Repository root (directory containing the root Cargo.toml).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the depguard config (defaults to .depguard.yml in the repo root).",
    )
    parser.add_argument("--profile", help="Override profile (strict|warn|compat).")
    parser.add_argument("--scope", help="Override scope (repo|diff).")
    parser.add_argument(
        "--max-findings",
        type=int,
        default=None,
        help="Override the maximum number of findings to emit.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Evaluate policy and write the report.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    check_parser.add_argument("--base", help="In diff scope: base revision (e.g. origin/main).")
    check_parser.add_argument("--head", help="In diff scope: head revision (e.g. HEAD).")
    check_parser.add_argument(
        "--report-out",
        type=Path,
        default=DEFAULT_REPORT_PATH,
        help="Where to write the JSON report.",
    )
    check_parser.add_argument(
        "--report-version",
        choices=sorted(REPORT_VERSIONS),
        default=DEFAULT_REPORT_VERSION,
        help="Report schema version to emit.",
    )
    check_parser.add_argument(
        "--write-markdown",
        action="store_true",
        help="Write a Markdown report alongside the JSON.",
    )
    check_parser.add_argument(
        "--markdown-out",
        type=Path,
        default=DEFAULT_MARKDOWN_PATH,
        help="Where to write the Markdown report (with --write-markdown).",
    )
    check_parser.add_argument(
        "--mode",
        choices=("standard", "cockpit"),
        default="standard",
        help="standard exits by verdict; cockpit exits 0 once a report is written.",
    )

    md_parser = subparsers.add_parser(
        "md",
        help="Render Markdown from an existing JSON report.",
    )
    _add_verbose_option(md_parser, suppress_default=True)
    _add_report_option(md_parser)
    md_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write Markdown here instead of stdout.",
    )

    annotations_parser = subparsers.add_parser(
        "annotations",
        help="Render GitHub Actions annotations from an existing JSON report.",
    )
    _add_verbose_option(annotations_parser, suppress_default=True)
    _add_report_option(annotations_parser)
    annotations_parser.add_argument(
        "--max",
        type=int,
        default=10,
        help="Maximum number of annotations to emit.",
    )

    explain_parser = subparsers.add_parser(
        "explain",
        help="Explain a check_id or code with remediation guidance.",
    )
    _add_verbose_option(explain_parser, suppress_default=True)
    explain_parser.add_argument(
        "identifier",
        help="A check_id (e.g. deps.no_wildcards) or code (e.g. wildcard_version).",
    )

    return parser


def main(argv: list[str] | None = None, *, orchestrator: Orchestrator | None = None) -> int:
    """CLI entrypoint for depguard commands. Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(
            verbose=bool(args.verbose), quiet=args.quiet, log_file=args.log_file
        )
    except OSError as exc:
        parser.exit(2, f"depguard: cannot open log file {args.log_file}: {exc}\n")

    if args.command == "check":
        return _cmd_check(parser, args, orchestrator or Orchestrator())
    if args.command == "md":
        return _cmd_md(parser, args)
    if args.command == "annotations":
        return _cmd_annotations(parser, args)
    if args.command == "explain":
        return _cmd_explain(args)
    parser.exit(2, "Unknown command\n")  # pragma: no cover - argparse enforces choices
    return 2  # pragma: no cover


def _cmd_check(
    parser: argparse.ArgumentParser, args: argparse.Namespace, orchestrator: Orchestrator
) -> int:
    overrides = Overrides(
        profile=args.profile,
        scope=args.scope,
        max_findings=args.max_findings,
    )
    try:
        report = orchestrator.run_check(
            args.repo_root,
            config_path=args.config,
            overrides=overrides,
            base=args.base,
            head=args.head,
            report_version=args.report_version,
        )
        if args.write_markdown:
            _write_text(args.markdown_out, render_markdown(report))
    except _UPSTREAM_ERRORS as exc:
        logger.error("depguard check failed: %s", exc)
        report = runtime_error_report(str(exc), version=args.report_version)

    try:
        write_report(args.report_out, report)
    except ReportError as exc:
        parser.exit(1, f"depguard: {exc}\n")

    if args.mode == "cockpit":
        return 0
    return verdict_exit_code(report.verdict)


def _cmd_md(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    report = _load_report(parser, args.report)
    markdown = render_markdown(report)
    if args.output is None:
        sys.stdout.write(markdown)
    else:
        try:
            _write_text(args.output, markdown)
        except OSError as exc:
            parser.exit(1, f"depguard: failed to write {args.output}: {exc}\n")
    return 0


def _cmd_annotations(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    report = _load_report(parser, args.report)
    for line in render_annotations(report, max(args.max, 0)):
        print(line)
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    explanation = lookup_explanation(args.identifier)
    if explanation is None:
        sys.stderr.write(format_not_found(args.identifier))
        return 1
    sys.stdout.write(format_explanation(explanation))
    return 0


def _load_report(parser: argparse.ArgumentParser, path: Path) -> ReportEnvelope:
    try:
        return read_report(path)
    except ReportError as exc:
        parser.exit(1, f"depguard: {exc}\n")
        raise  # pragma: no cover - parser.exit raises SystemExit


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote %s", path)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
