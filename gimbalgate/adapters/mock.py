"""
Mock runner — returns a prepared result tree instead of auditing.

Used by the tests and by the CLI's ``--results`` replay mode, where a
results file written by an earlier audit is fed back through the gate.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from gimbalgate.adapters.base import AuditRunner, AuditRunnerError
from gimbalgate.adapters.gimbal import parse_results
from gimbalgate.core.models.results import AuditRun


class MockAuditRunner(AuditRunner):
    """Runner that always answers with the same tree.

    By default the tree is empty and successful. Can be configured to
    raise instead, to exercise runner failure handling.
    """

    def __init__(
        self,
        run: AuditRun | dict[str, Any] | None = None,
        runner_name: str = "mock",
        available: bool = True,
    ):
        if isinstance(run, dict):
            run = AuditRun.model_validate(run)
        self._run = run if run is not None else AuditRun(success=True)
        self._name = runner_name
        self._available = available
        self._error: Exception | None = None
        self._call_log: list[dict[str, Any]] = []

    @classmethod
    def from_file(cls, path: Path) -> MockAuditRunner:
        """Load the tree from a JSON results file."""
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise AuditRunnerError(f"Cannot read results file {path}: {e}") from e
        return cls(parse_results(text), runner_name=f"file:{path.name}")

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[dict[str, Any]]:
        """All option sets this runner has been called with."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, error: Exception | str = "Mock failure") -> None:
        """Make subsequent audit() calls raise."""
        self._error = error if isinstance(error, Exception) else AuditRunnerError(error)

    async def audit(self, options: dict[str, Any]) -> AuditRun:
        self._call_log.append(dict(options))
        if self._error is not None:
            raise self._error
        return self._run
