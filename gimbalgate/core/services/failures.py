"""
Failure extraction — pick the failed reports out of a result tree.

A report is surfaced only when both it and its job explicitly failed.
Source order is preserved; nothing is sorted or de-duplicated.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from gimbalgate.core.models.results import AuditRun, JobResult, Report, Status

logger = logging.getLogger(__name__)


class Failure(NamedTuple):
    job: JobResult
    report: Report


def extract_failures(run: AuditRun) -> list[Failure]:
    """Return the ``(job, report)`` pairs that failed, in tree order."""
    failures: list[Failure] = []
    for job in run.data:
        if not job.failed:
            if job.status is Status.UNKNOWN and job.failed_reports():
                logger.debug(
                    "Job '%s' has no success flag; %d failed report(s) not surfaced",
                    job.label,
                    len(job.failed_reports()),
                )
            continue
        failures.extend(Failure(job, report) for report in job.failed_reports())
    return failures
