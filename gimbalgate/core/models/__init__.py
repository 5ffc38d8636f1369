"""
Domain models — Pydantic types for the quality gate.

All models are re-exported here for convenient access:

    from gimbalgate.core.models import AuditRun, Diagnostic, PluginConfig
"""

from gimbalgate.core.models.bailout import BailoutRecord, ModuleStats
from gimbalgate.core.models.config import AuditOptions, PluginConfig
from gimbalgate.core.models.diagnostic import Diagnostic, Severity
from gimbalgate.core.models.results import AuditRun, JobResult, Report, Status

__all__ = [
    # results.py
    "AuditRun",
    # config.py
    "AuditOptions",
    # bailout.py
    "BailoutRecord",
    # diagnostic.py
    "Diagnostic",
    "JobResult",
    "ModuleStats",
    "PluginConfig",
    "Report",
    "Severity",
    "Status",
]
