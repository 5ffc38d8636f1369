"""
Diagnostics — turn failed reports into build messages and route them.

The ``bail`` policy is passed in explicitly. With ``bail`` every
message becomes a build error; without it, a warning. Each message
lands in exactly one of the two sinks.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, MutableSequence
from dataclasses import dataclass

from gimbalgate.core.models.diagnostic import Diagnostic, Severity
from gimbalgate.core.models.results import AuditRun
from gimbalgate.core.services.failures import Failure, extract_failures

logger = logging.getLogger(__name__)


@dataclass
class RoutingSummary:
    """How many messages went where."""

    errors: int = 0
    warnings: int = 0

    @property
    def total(self) -> int:
        return self.errors + self.warnings

    def to_dict(self) -> dict:
        return {"errors": self.errors, "warnings": self.warnings, "total": self.total}


def build_diagnostics(failures: Iterable[Failure], *, bail: bool) -> list[Diagnostic]:
    """One diagnostic per failure, severity fixed by the policy."""
    severity = Severity.for_policy(bail)
    return [
        Diagnostic(
            category=job.label,
            metric=report.label,
            observed=report.value,
            threshold=report.threshold,
            severity=severity,
        )
        for job, report in failures
    ]


def diagnose(run: AuditRun, *, bail: bool) -> list[Diagnostic]:
    """Failure extraction and diagnostic construction in one step."""
    return build_diagnostics(extract_failures(run), bail=bail)


def format_messages(run: AuditRun, *, bail: bool = False) -> list[str]:
    """Rendered messages for a tree. Pure: same tree, same list."""
    return [d.message for d in diagnose(run, bail=bail)]


def route_diagnostics(
    diagnostics: Iterable[Diagnostic],
    *,
    errors: MutableSequence[str],
    warnings: MutableSequence[str],
) -> RoutingSummary:
    """Append each rendered diagnostic to the sink its severity selects."""
    summary = RoutingSummary()
    for diagnostic in diagnostics:
        if diagnostic.severity is Severity.ERROR:
            errors.append(diagnostic.message)
            summary.errors += 1
        else:
            warnings.append(diagnostic.message)
            summary.warnings += 1
        logger.debug("%s: %s", diagnostic.severity.value, diagnostic.message)
    return summary
