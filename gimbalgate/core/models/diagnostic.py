"""
Diagnostic model — one build message derived from a failing report.

Diagnostics stay structured until they reach a sink. Only then are
they rendered into the message string the build tool shows.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

MESSAGE_TEMPLATE = "[Gimbal: {category}] {metric}: {observed} (threshold {threshold})."


class Severity(str, Enum):
    """Which diagnostics collection a message lands in."""

    ERROR = "error"
    WARNING = "warning"

    @classmethod
    def for_policy(cls, bail: bool) -> Severity:
        return cls.ERROR if bail else cls.WARNING


class Diagnostic(BaseModel):
    """A failed threshold, ready to be routed."""

    model_config = ConfigDict(frozen=True)

    category: str      # job label
    metric: str        # report label
    observed: str      # report value
    threshold: str
    severity: Severity = Severity.WARNING

    @property
    def message(self) -> str:
        """Render the diagnostic. Fields are interpolated verbatim."""
        return MESSAGE_TEMPLATE.format(
            category=self.category,
            metric=self.metric,
            observed=self.observed,
            threshold=self.threshold,
        )

    def __str__(self) -> str:
        return self.message
