"""
gimbal-gate — post-build performance quality gate.

    from gimbalgate import GimbalPlugin

    GimbalPlugin({"bail": True, "options": {"lighthouse": False}}).apply(compiler)
"""

__version__ = "0.1.0"

from gimbalgate.core.engine.plugin import GimbalPlugin  # noqa: E402

__all__ = ["GimbalPlugin", "__version__"]
