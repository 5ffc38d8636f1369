"""
Gate use case — run the quality gate against a finished build.

This is the top-level orchestrator for the CLI: it loads config, picks
a runner, wires the plugin into a compiler for the build directory,
runs the ``emit`` and ``done`` hooks, and collects what landed in the
diagnostics collections.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gimbalgate.adapters.base import AuditRunner, AuditRunnerError
from gimbalgate.core.config.loader import ConfigError, load_config, locate_config
from gimbalgate.core.engine.build import Compiler, ProgressReporter, Stats, resolve_mode
from gimbalgate.core.engine.plugin import AuditOutcome, BailoutOutcome, GimbalPlugin

logger = logging.getLogger(__name__)


@dataclass
class GateResult:
    """Result of running the gate on one build."""

    build_dir: Path | None = None
    mode: str | None = None
    skipped: bool = False
    run_success: bool | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    bailout_report: Path | None = None
    bailouts_written: int = 0
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Whether the build should be considered broken."""
        return self.error is not None or bool(self.errors)

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["build_dir"] = str(self.build_dir)
        result["mode"] = self.mode
        result["skipped"] = self.skipped
        result["run_success"] = self.run_success
        result["errors"] = list(self.errors)
        result["warnings"] = list(self.warnings)
        result["passed"] = not self.failed
        if self.bailout_report is not None:
            result["bailout_report"] = {
                "path": str(self.bailout_report),
                "modules": self.bailouts_written,
            }
        return result


def load_stats(stats_path: Path) -> dict[str, Any]:
    """Read a stats snapshot. A bare module list is accepted too.

    Raises:
        ConfigError: If the file is unreadable or not JSON.
    """
    try:
        data = json.loads(stats_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot load stats file {stats_path}: {e}") from e
    if isinstance(data, list):
        return {"modules": data}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a JSON object in {stats_path}, got {type(data).__name__}")
    return data


def run_gate(
    build_dir: Path,
    config_path: Path | None = None,
    results_path: Path | None = None,
    stats_path: Path | None = None,
    mode: str | None = None,
    overrides: dict[str, Any] | None = None,
    runner: AuditRunner | None = None,
    progress: ProgressReporter | None = None,
) -> GateResult:
    """Run both gate pipelines against a finished build.

    Args:
        build_dir: The build output directory (the compiler output path).
        config_path: Optional explicit path to gimbal-gate.yml.
        results_path: Replay a saved results file instead of auditing.
        stats_path: Stats snapshot for the bailout report. Without it
            no bailout report is written.
        mode: Build mode. None = resolve from the environment.
        overrides: Config fields (snake_case) that win over the file.
        runner: Optional pre-configured runner.
        progress: Optional progress callback.

    Returns:
        GateResult with the collected diagnostics.
    """
    result = GateResult(build_dir=build_dir, mode=resolve_mode(mode))
    source = locate_config(config_path)

    # ── Load config and stats ────────────────────────────────────
    try:
        config = load_config(source.path)
        stats_snapshot = load_stats(stats_path) if stats_path is not None else None
    except ConfigError as e:
        result.error = str(e)
        return result

    if overrides:
        config = config.model_copy(update=overrides)
    if stats_snapshot is None and config.bailout_report_enabled:
        logger.info("No stats snapshot given; bailout report disabled for this run")
        config = config.model_copy(update={"optimization_bailout": False})

    # ── Pick the runner ──────────────────────────────────────────
    if runner is None and results_path is not None:
        from gimbalgate.adapters.mock import MockAuditRunner

        try:
            runner = MockAuditRunner.from_file(results_path)
        except AuditRunnerError as e:
            result.error = str(e)
            return result

    plugin = GimbalPlugin(config, runner=runner)

    # ── Wire and run the hooks ───────────────────────────────────
    compiler = Compiler(
        output_path=build_dir,
        context=source.project_dir,
        mode=result.mode,
        progress=progress,
    )
    plugin.apply(compiler)

    compilation = compiler.new_compilation()
    stats = Stats(compilation, stats_snapshot)

    try:
        emitted = asyncio.run(compiler.emit(compilation))
    except (AuditRunnerError, OSError) as e:
        result.error = f"Audit failed: {e}"
        return result

    try:
        done = asyncio.run(compiler.done(stats))
    except OSError as e:
        result.error = f"Cannot write bailout report: {e}"
        return result

    result.errors = list(compilation.errors)
    result.warnings = list(compilation.warnings)

    for outcome in emitted:
        if isinstance(outcome, AuditOutcome):
            result.skipped = outcome.skipped
            result.run_success = outcome.run_success
    for outcome in done:
        if isinstance(outcome, BailoutOutcome):
            result.bailout_report = outcome.path
            result.bailouts_written = outcome.modules

    logger.info("Gate finished: %d error(s), %d warning(s)", len(result.errors), len(result.warnings))
    return result
