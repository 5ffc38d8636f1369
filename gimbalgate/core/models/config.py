"""
Plugin configuration model.

Loaded from gimbal-gate.yml (or passed in directly by the host) and
frozen after construction. The ``bail`` flag is the only policy knob:
it decides whether failed thresholds break the build.

Keys are accepted in both the camelCase spelling used by build-tool
configs and Python snake_case. Unknown keys are kept as extras.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BAILOUT_REPORT = "optimization-bailouts.json"


class AuditOptions(BaseModel):
    """Options forwarded to the Audit Runner."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    build_dir: str = Field(default="", alias="buildDir")
    comment: bool = True
    verbose: bool = False
    check_thresholds: bool = Field(default=True, alias="checkThresholds")

    # Audit categories
    size: bool = True
    calculate_unused_source: bool = Field(default=True, alias="calculateUnusedSource")
    heap_snapshot: bool = Field(default=True, alias="heapSnapshot")
    lighthouse: bool = True

    def to_runner_options(self) -> dict[str, Any]:
        """Options in the runner's own (camelCase) vocabulary."""
        return self.model_dump(by_alias=True)

    def enabled_audits(self) -> list[str]:
        audits = {
            "size": self.size,
            "calculateUnusedSource": self.calculate_unused_source,
            "heapSnapshot": self.heap_snapshot,
            "lighthouse": self.lighthouse,
        }
        return [name for name, on in audits.items() if on]


class PluginConfig(BaseModel):
    """Complete, immutable plugin configuration."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    bail: bool = False
    optimization_bailout: bool | str = Field(default=False, alias="optimizationBailout")
    options: AuditOptions = Field(default_factory=AuditOptions)

    @property
    def bailout_report_enabled(self) -> bool:
        if isinstance(self.optimization_bailout, str):
            return bool(self.optimization_bailout)
        return self.optimization_bailout

    @property
    def bailout_report_name(self) -> str | None:
        """File name for the bailout report, or None when disabled."""
        if not self.bailout_report_enabled:
            return None
        if isinstance(self.optimization_bailout, str):
            return self.optimization_bailout
        return DEFAULT_BAILOUT_REPORT
