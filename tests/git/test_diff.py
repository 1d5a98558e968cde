"""Tests for changed-file discovery and git error classification."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from depguard.git.diff import ChangedFilesProvider, GitDiffError, classify_diff_error


def test_changed_files_runs_git_diff(tmp_path: Path) -> None:
    calls: list[tuple[list[str], Path]] = []

    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        calls.append((list(args), Path(cwd)))
        return "crates/a/Cargo.toml\n\nsrc\\lib.rs\n"

    provider = ChangedFilesProvider(runner=runner)
    files = provider.changed_files(tmp_path, "origin/main", "HEAD")

    assert files == ["crates/a/Cargo.toml", "src/lib.rs"]
    assert calls == [(["git", "diff", "--name-only", "origin/main..HEAD"], tmp_path)]


def test_changed_files_classifies_unreachable_base(tmp_path: Path) -> None:
    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        raise subprocess.CalledProcessError(
            128, args, stderr="fatal: bad revision 'origin/main..HEAD'\n"
        )

    provider = ChangedFilesProvider(runner=runner)

    with pytest.raises(GitDiffError) as excinfo:
        provider.changed_files(tmp_path, "origin/main", "HEAD")

    assert excinfo.value.kind == GitDiffError.BASE_UNREACHABLE
    assert "git fetch --unshallow" in str(excinfo.value)
    assert "git fetch origin origin/main" in str(excinfo.value)


def test_changed_files_wraps_missing_git(tmp_path: Path) -> None:
    def runner(args, cwd, capture_output=False):  # type: ignore[no-untyped-def]
        raise FileNotFoundError("git")

    with pytest.raises(GitDiffError, match="failed to run git") as excinfo:
        ChangedFilesProvider(runner=runner).changed_files(tmp_path, "a", "b")

    assert excinfo.value.kind == GitDiffError.OTHER


@pytest.mark.parametrize(
    ("stderr", "kind"),
    [
        ("fatal: ambiguous argument 'main': unknown revision", GitDiffError.BASE_UNREACHABLE),
        ("fatal: Invalid revision range main..topic", GitDiffError.BASE_UNREACHABLE),
        ("fatal: no such ref: topic", GitDiffError.HEAD_UNREACHABLE),
        ("error: something unexpected", GitDiffError.OTHER),
    ],
)
def test_classify_diff_error(stderr: str, kind: str) -> None:
    error = classify_diff_error("main", "topic", stderr)

    assert error.kind == kind
    assert error.stderr == stderr


def test_head_message_names_head() -> None:
    error = classify_diff_error("main", "feature-x", "fatal: bad object feature-x")

    assert "git head revision 'feature-x' is not reachable" in str(error)
