"""
GimbalPlugin — the quality gate, attached to a build's lifecycle.

On ``emit`` it audits the production build output and turns failed
thresholds into build errors (``bail``) or warnings. On ``done``, when
enabled, it writes the filtered optimization bailout report.

The plugin holds only its frozen configuration and its runner. All
per-build state lives on the compilation passed to each hook.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gimbalgate.adapters.base import AuditRunner
from gimbalgate.core.config.merge import merge_config
from gimbalgate.core.engine.build import Compilation, Compiler, HookContext, Stats, is_production
from gimbalgate.core.models.config import PluginConfig
from gimbalgate.core.models.diagnostic import Diagnostic
from gimbalgate.core.persistence.bailout_report import BailoutReportWriter
from gimbalgate.core.services.bailouts import collect_bailouts, resolve_report_path
from gimbalgate.core.services.diagnostics import RoutingSummary, diagnose, route_diagnostics

logger = logging.getLogger(__name__)

PLUGIN_NAME = "GimbalPlugin"

# Base runner options; the configured options override these.
_BASE_RUNNER_OPTIONS: dict[str, Any] = {
    "buildDir": "",
    "comment": True,
    "verbose": False,
    "checkThresholds": True,
}


@dataclass
class AuditOutcome:
    """What one ``emit`` pass did."""

    skipped: bool = False
    run_success: bool | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    routing: RoutingSummary = field(default_factory=RoutingSummary)


@dataclass
class BailoutOutcome:
    """What one ``done`` pass wrote."""

    path: Path
    modules: int = 0


class GimbalPlugin:
    """Quality gate plugin.

    Args:
        config: Partial options (mapping) or a ready PluginConfig.
        runner: Audit runner. Defaults to the gimbal CLI runner.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | PluginConfig | None = None,
        runner: AuditRunner | None = None,
    ):
        self.cfg = merge_config(config)
        if runner is None:
            from gimbalgate.adapters.gimbal import GimbalCliRunner

            runner = GimbalCliRunner()
        self.runner = runner

    def apply(self, compiler: Compiler) -> None:
        """Register the plugin's handlers on the compiler hooks."""
        compiler.hooks.emit.tap(PLUGIN_NAME, self.execute_audits, context=True)
        if self.cfg.bailout_report_enabled:
            compiler.hooks.done.tap(PLUGIN_NAME, self.write_bailouts)

    # ── emit ────────────────────────────────────────────────────

    def runner_options(self, compilation: Compilation) -> dict[str, Any]:
        return {
            "cwd": str(compilation.output_path),
            **_BASE_RUNNER_OPTIONS,
            **self.cfg.options.to_runner_options(),
        }

    async def execute_audits(
        self,
        context: HookContext | None,
        compilation: Compilation,
    ) -> AuditOutcome:
        """Audit the build and route failures into the compilation.

        Does nothing outside production builds. Runner exceptions are
        not caught.
        """
        if not is_production(compilation.mode):
            logger.debug("Not a production build; skipping audits")
            return AuditOutcome(skipped=True)

        report_progress = context.report_progress if context else None
        if report_progress:
            report_progress(0, "Starting performance audit")

        run = await self.runner.audit(self.runner_options(compilation))

        if report_progress:
            report_progress(1, "Performance audit complete")

        diagnostics = diagnose(run, bail=self.cfg.bail)
        routing = route_diagnostics(
            diagnostics,
            errors=compilation.errors,
            warnings=compilation.warnings,
        )
        logger.info(
            "Audit finished via %s: %d job(s), %d failed threshold(s) → %d error(s), %d warning(s)",
            self.runner.name,
            len(run.data),
            routing.total,
            routing.errors,
            routing.warnings,
        )
        return AuditOutcome(
            run_success=run.success,
            diagnostics=diagnostics,
            routing=routing,
        )

    # ── done ────────────────────────────────────────────────────

    def bailout_report_path(self, base_dir: Path | None = None) -> Path | None:
        name = self.cfg.bailout_report_name
        if name is None:
            return None
        return resolve_report_path(name, base_dir)

    async def write_bailouts(self, stats: Stats) -> BailoutOutcome | None:
        """Extract, filter and write the bailout report. Write errors propagate."""
        path = self.bailout_report_path(stats.compilation.compiler.context)
        if path is None:
            return None
        records = collect_bailouts(stats.to_json())
        written = await BailoutReportWriter(path).write(records)
        return BailoutOutcome(path=written, modules=len(records))
