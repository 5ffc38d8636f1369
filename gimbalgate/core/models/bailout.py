"""
Bailout models — per-module "could not optimize" diagnostics.

``ModuleStats`` is the minimal slice of the build tool's stats output
that the bailout pipeline reads. ``BailoutRecord`` is what survives
extraction and ends up in the report.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModuleStats(BaseModel):
    """One module entry from a stats snapshot."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    # Kept untyped: anything that is not a list is treated as "no bailouts".
    optimization_bailout: Any = Field(default=None, alias="optimizationBailout")
    chunks: Any = Field(default_factory=list)


class BailoutRecord(BaseModel):
    """A module with at least one optimization bailout reason."""

    model_config = ConfigDict(frozen=True)

    name: str
    reasons: list[str]
    chunks: Any = Field(default_factory=list)

    def as_triple(self) -> list[Any]:
        """Report representation: ``[name, reasons, chunks]``."""
        return [self.name, list(self.reasons), self.chunks]
