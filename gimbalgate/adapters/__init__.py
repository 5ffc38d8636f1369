"""
Audit runners — the only code that talks to the external audit tool.
"""

from gimbalgate.adapters.base import AuditRunner, AuditRunnerError
from gimbalgate.adapters.gimbal import GimbalCliRunner
from gimbalgate.adapters.mock import MockAuditRunner

__all__ = [
    "AuditRunner",
    "AuditRunnerError",
    "GimbalCliRunner",
    "MockAuditRunner",
]
