"""Pipeline orchestration for ``depguard check``."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from .checks import Check, discover_checks
from .config import CONFIG_FILENAME, ConfigError, load_config
from .engine import evaluate
from .failsafe import empty_report
from .git.diff import ChangedFilesProvider
from .logging import get_logger
from .policy import EffectiveConfig, Scope
from .report import DEFAULT_REPORT_VERSION, ReportEnvelope, utc_now
from .resolve import Overrides, resolve_config
from .workspace import ROOT_MANIFEST, ScopeInput, build_workspace_model


class Orchestrator:
    """Coordinates config resolution, scoping, parsing and evaluation.

    Without explicit ``checks`` each run uses the built-ins plus any checks
    registered under the ``depguard.checks`` entry-point group.
    """

    def __init__(
        self,
        checks: Optional[Sequence[Check]] = None,
        changed_files_provider: ChangedFilesProvider | None = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.checks = tuple(checks) if checks is not None else None
        self.changed_files_provider = changed_files_provider or ChangedFilesProvider()
        self.max_workers = max_workers
        self.logger = get_logger("orchestrator")

    def run_check(
        self,
        repo_root: str | Path,
        *,
        config_path: str | Path | None = None,
        overrides: Optional[Overrides] = None,
        base: Optional[str] = None,
        head: Optional[str] = None,
        report_version: str = DEFAULT_REPORT_VERSION,
    ) -> ReportEnvelope:
        """Evaluate the workspace at ``repo_root`` and return the report envelope."""
        started_at = utc_now()
        root = Path(repo_root).expanduser().resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"repo root does not exist: {root}")
        self.logger.info("Starting check run for %s", root)

        effective = self._load_config(root, config_path, overrides)

        if not (root / ROOT_MANIFEST).exists():
            self.logger.warning("No %s found at %s; emitting empty report", ROOT_MANIFEST, root)
            return empty_report(effective.scope.value, effective.profile, version=report_version)

        scope_input = self._scope_input(root, effective, base, head)
        model = build_workspace_model(root, scope_input)
        self.logger.debug(
            "Parsed %d manifests with %d dependencies",
            len(model.manifests),
            model.dependency_count(),
        )

        checks = self.checks if self.checks is not None else tuple(discover_checks())
        report = evaluate(model, effective, checks=checks, max_workers=self.max_workers)
        self.logger.info(
            "Verdict %s with %d findings (%d emitted)",
            report.verdict.value,
            report.data.findings_total,
            report.data.findings_emitted,
        )
        return ReportEnvelope.from_domain(
            report,
            version=report_version,
            started_at=started_at,
            finished_at=utc_now(),
        )

    # ------------------------------------------------------------------
    # Internals

    def _load_config(
        self,
        root: Path,
        config_path: str | Path | None,
        overrides: Optional[Overrides],
    ) -> EffectiveConfig:
        path = Path(config_path) if config_path is not None else Path(CONFIG_FILENAME)
        if not path.is_absolute():
            path = root / path
        raw = load_config(path)
        return resolve_config(raw, overrides).effective

    def _scope_input(
        self,
        root: Path,
        effective: EffectiveConfig,
        base: Optional[str],
        head: Optional[str],
    ) -> ScopeInput:
        if effective.scope is not Scope.DIFF:
            return ScopeInput.repo()
        if not base or not head:
            raise ConfigError("diff scope requires --base and --head")
        changed = self.changed_files_provider.changed_files(root, base, head)
        return ScopeInput.diff(changed)


__all__ = ["Orchestrator"]
