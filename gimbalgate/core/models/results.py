"""
Result tree models — what the Audit Runner hands back for one build.

The tree is three levels deep: an AuditRun holds JobResults (one per
audit category, e.g. "size" or "lighthouse"), and each JobResult holds
the Reports measured for that category.

Every level carries an optional ``success`` flag. Its absence is NOT
a failure: filters only react to an explicit ``False``. The three-valued
``status`` property makes that distinction explicit.

The tree is built by the runner and only ever read here.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Status(str, Enum):
    """Explicit outcome of a result node."""

    PASSED = "passed"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @classmethod
    def from_flag(cls, success: bool | None) -> Status:
        """Map an optional success flag onto a status."""
        if success is True:
            return cls.PASSED
        if success is False:
            return cls.FAILED
        return cls.UNKNOWN


class _ResultNode(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    success: bool | None = None

    @property
    def status(self) -> Status:
        return Status.from_flag(self.success)

    @property
    def failed(self) -> bool:
        """True only when the node explicitly reported failure."""
        return self.status is Status.FAILED


class Report(_ResultNode):
    """One measured metric within a job."""

    label: str
    value: str = ""        # observed value, pre-formatted by the runner
    threshold: str = ""    # configured limit, pre-formatted by the runner

    @field_validator("value", "threshold", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        # Runners occasionally emit raw numbers; keep them verbatim as text.
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class JobResult(_ResultNode):
    """One audited category and its reports."""

    label: str
    data: list[Report] = Field(default_factory=list)

    def failed_reports(self) -> list[Report]:
        return [r for r in self.data if r.failed]


class AuditRun(_ResultNode):
    """Top-level result of a single audit invocation."""

    data: list[JobResult] = Field(default_factory=list)

    @property
    def report_count(self) -> int:
        return sum(len(job.data) for job in self.data)
