"""Changed-file discovery for diff-scoped runs."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List

from ..logging import get_logger

logger = get_logger("git.diff")


class GitDiffError(RuntimeError):
    """Raised when ``git diff`` cannot produce a changed-file list."""

    BASE_UNREACHABLE = "base_unreachable"
    HEAD_UNREACHABLE = "head_unreachable"
    OTHER = "other"

    def __init__(self, kind: str, message: str, *, stderr: str = "") -> None:
        super().__init__(message)
        self.kind = kind
        self.stderr = stderr


def classify_diff_error(base: str, head: str, stderr: str) -> GitDiffError:
    """Map git's stderr to a :class:`GitDiffError` with remediation text."""
    lowered = stderr.lower()
    base_unreachable = (
        "unknown revision" in lowered
        or "bad revision" in lowered
        or "invalid revision range" in lowered
        or ("fatal:" in lowered and base.lower() in lowered)
    )
    if base_unreachable:
        return GitDiffError(
            GitDiffError.BASE_UNREACHABLE,
            f"git base revision '{base}' is not reachable.\n\n"
            "This commonly happens in CI environments with shallow clones.\n\n"
            "Remediation options:\n"
            "1. Fetch more history: git fetch --deepen=100\n"
            "2. Fetch the full history: git fetch --unshallow\n"
            f"3. Fetch the specific base ref: git fetch origin {base}\n"
            "4. Use --scope repo instead of --scope diff\n\n"
            f"Git error: {stderr.strip()}",
            stderr=stderr,
        )
    if "fatal:" in lowered and head.lower() in lowered:
        return GitDiffError(
            GitDiffError.HEAD_UNREACHABLE,
            f"git head revision '{head}' is not reachable.\n\n"
            "Remediation: ensure the head ref exists locally.\n\n"
            f"Git error: {stderr.strip()}",
            stderr=stderr,
        )
    return GitDiffError(GitDiffError.OTHER, f"git diff failed: {stderr.strip()}", stderr=stderr)


class ChangedFilesProvider:
    """Lists files changed between two revisions."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def changed_files(self, repo_root: Path, base: str, head: str) -> List[str]:
        args = ["git", "diff", "--name-only", f"{base}..{head}"]
        try:
            output = self._runner(args, cwd=Path(repo_root), capture_output=True)
        except subprocess.CalledProcessError as exc:
            raise classify_diff_error(base, head, exc.stderr or "") from exc
        except OSError as exc:
            raise GitDiffError(GitDiffError.OTHER, f"failed to run git: {exc}") from exc
        files = [line.strip().replace("\\", "/") for line in output.splitlines() if line.strip()]
        logger.debug("git diff %s..%s reported %d changed files", base, head, len(files))
        return files

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


__all__ = ["ChangedFilesProvider", "GitDiffError", "classify_diff_error"]
