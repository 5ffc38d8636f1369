"""
Gimbal CLI runner — audits a build by launching the gimbal command.

The command writes its results as JSON to a temporary file, which is
parsed into an AuditRun. The command prefix defaults to ``npx gimbal``
and can be overridden with GIMBAL_GATE_RUNNER.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shlex
import shutil
import tempfile
import time
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gimbalgate.adapters.base import AuditRunner, AuditRunnerError
from gimbalgate.core.models.results import AuditRun

logger = logging.getLogger(__name__)

RUNNER_ENV_VAR = "GIMBAL_GATE_RUNNER"
DEFAULT_COMMAND = ("npx", "gimbal")

# option key → CLI flag; booleans become --flag / --no-flag
_BOOL_FLAGS = {
    "comment": "comment",
    "verbose": "verbose",
    "checkThresholds": "check-thresholds",
    "size": "size",
    "calculateUnusedSource": "calculate-unused-source",
    "heapSnapshot": "heap-snapshot",
    "lighthouse": "lighthouse",
}


def build_command(
    options: dict[str, Any],
    output_json: Path,
    command: tuple[str, ...] = DEFAULT_COMMAND,
) -> list[str]:
    """Translate runner options into a gimbal command line."""
    args = list(command)
    if options.get("cwd"):
        args += ["--cwd", str(options["cwd"])]
    if options.get("buildDir"):
        args += ["--build-dir", str(options["buildDir"])]
    for key, flag in _BOOL_FLAGS.items():
        if key not in options:
            continue
        args.append(f"--{flag}" if options[key] else f"--no-{flag}")
    args += ["--output-json", str(output_json)]
    return args


class GimbalCliRunner(AuditRunner):
    """Run audits through the gimbal command-line tool.

    Args:
        command: Command prefix. Defaults to GIMBAL_GATE_RUNNER, split
            shell-style, or ``npx gimbal``.
        timeout: Seconds before the audit is killed (default: 900).
    """

    def __init__(self, command: tuple[str, ...] | None = None, timeout: int = 900):
        if command is None:
            env_cmd = os.environ.get(RUNNER_ENV_VAR)
            command = tuple(shlex.split(env_cmd)) if env_cmd else DEFAULT_COMMAND
        self._command = command
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "gimbal"

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    def is_available(self) -> bool:
        return bool(self._command) and shutil.which(self._command[0]) is not None

    async def audit(self, options: dict[str, Any]) -> AuditRun:
        if not self.is_available():
            raise AuditRunnerError(f"Audit command not found: {self._command[0] if self._command else '<empty>'}")

        with tempfile.TemporaryDirectory(prefix="gimbal-gate-") as tmp:
            output_json = Path(tmp) / "results.json"
            cmd = build_command(options, output_json, self._command)
            cwd = options.get("cwd") or None

            logger.debug("Executing: %s (cwd=%s)", shlex.join(cmd), cwd)
            start = time.monotonic()

            try:
                process = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=cwd,
                )
            except OSError as e:
                raise AuditRunnerError(f"Cannot launch {cmd[0]}: {e}") from e
            try:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
            except TimeoutError:
                process.kill()
                await process.wait()
                raise AuditRunnerError(f"Audit timed out after {self._timeout}s") from None

            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.info("Audit command finished in %dms (exit %s)", elapsed_ms, process.returncode)

            # gimbal exits non-zero on threshold failures but still writes results
            if not output_json.is_file():
                detail = stderr.decode("utf-8", errors="replace").strip() or stdout.decode(
                    "utf-8", errors="replace"
                ).strip()
                raise AuditRunnerError(
                    f"Audit produced no results (exit {process.returncode}): {detail[:500]}"
                )

            return parse_results(output_json.read_text(encoding="utf-8"))


def parse_results(text: str) -> AuditRun:
    """Parse a JSON results document into an AuditRun.

    Raises:
        AuditRunnerError: If the text is not a valid result tree.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise AuditRunnerError(f"Invalid audit results JSON: {e}") from e
    try:
        return AuditRun.model_validate(data)
    except ValidationError as e:
        raise AuditRunnerError(f"Unexpected audit results shape: {e}") from e
