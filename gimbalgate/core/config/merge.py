"""
Configuration merge — partial options in, complete PluginConfig out.

The top level is shallow-merged over the defaults, and so is the nested
``options`` mapping. Nothing here raises: values that fail validation
fall back to their defaults with a warning, unknown keys pass through.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from gimbalgate.core.models.config import PluginConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "bail": False,
    "optimizationBailout": False,
}

DEFAULT_OPTIONS: dict[str, Any] = {
    "buildDir": "",
    "comment": True,
    "verbose": False,
    "checkThresholds": True,
    "size": True,
    "calculateUnusedSource": True,
    "heapSnapshot": True,
    "lighthouse": True,
}

# snake_case spellings accepted from Python callers
_KEY_ALIASES = {
    "optimization_bailout": "optimizationBailout",
    "build_dir": "buildDir",
    "check_thresholds": "checkThresholds",
    "calculate_unused_source": "calculateUnusedSource",
    "heap_snapshot": "heapSnapshot",
}


def _normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {_KEY_ALIASES.get(str(k), str(k)): v for k, v in data.items()}


def merge_config(partial: Mapping[str, Any] | PluginConfig | None = None) -> PluginConfig:
    """Build a complete configuration from a partial one.

    Args:
        partial: User options. May omit any key, including ``options``,
            and may carry a partial ``options`` mapping.

    Returns:
        Frozen PluginConfig.
    """
    if isinstance(partial, PluginConfig):
        return partial

    top = _normalize_keys(partial or {})
    raw_options = top.pop("options", None)
    if raw_options is not None and not isinstance(raw_options, Mapping):
        logger.warning("Ignoring non-mapping 'options' value: %r", raw_options)
        raw_options = None

    merged: dict[str, Any] = {**DEFAULT_CONFIG, **top}
    merged["options"] = {**DEFAULT_OPTIONS, **_normalize_keys(raw_options or {})}
    return _validate_with_fallback(merged)


def _validate_with_fallback(merged: dict[str, Any]) -> PluginConfig:
    try:
        return PluginConfig.model_validate(merged)
    except ValidationError as e:
        for err in e.errors():
            loc = err.get("loc", ())
            if _drop_key(merged, loc):
                logger.warning(
                    "Invalid config value at '%s' (%s); using default",
                    ".".join(str(p) for p in loc),
                    err.get("msg", "invalid"),
                )
    return PluginConfig.model_validate(merged)


def _drop_key(data: dict[str, Any], loc: tuple[Any, ...]) -> bool:
    """Remove the deepest existing key along ``loc``. True if removed."""
    node: Any = data
    for i, part in enumerate(loc):
        if not isinstance(node, dict) or part not in node:
            return False
        child = node[part]
        is_last = i == len(loc) - 1
        if is_last or not isinstance(child, dict) or loc[i + 1] not in child:
            del node[part]
            return True
        node = child
    return False
