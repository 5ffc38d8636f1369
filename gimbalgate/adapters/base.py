"""
Audit runner base — the contract between the gate and the audit tool.

The gate never measures anything itself. It asks a runner to audit a
build directory and gets an AuditRun tree back. Every runner implements
this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from gimbalgate.core.models.results import AuditRun


class AuditRunnerError(Exception):
    """Raised when a runner cannot produce a result tree at all.

    Threshold failures are NOT runner errors; they are reported inside
    the tree through ``success: false``.
    """


class AuditRunner(ABC):
    """Abstract base class for audit runners.

    To create a new runner:
        1. Subclass AuditRunner
        2. Implement name, is_available, audit
        3. Pass an instance to GimbalPlugin
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'gimbal', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying audit tool can be launched.

        Should be fast and never raise.
        """

    @abstractmethod
    async def audit(self, options: dict[str, Any]) -> AuditRun:
        """Run the configured audits and return the result tree.

        Args:
            options: ``cwd`` plus the runner options (``buildDir``,
                ``comment``, ``verbose``, ``checkThresholds`` and the
                per-category toggles).

        Raises:
            AuditRunnerError: If no result tree could be produced.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
