"""
Configuration loader — reads gimbal-gate.yml into a PluginConfig.

It reads YAML, merges it over the defaults and returns the frozen
configuration model. The file may be flat, or keep everything under
a top-level ``gimbal:`` key.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NamedTuple

import yaml

from gimbalgate.core.config.merge import merge_config
from gimbalgate.core.models.config import PluginConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "gimbal-gate.yml"

# Upward search stops after this many directories
MAX_SEARCH_DEPTH = 20


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or malformed."""


class ConfigSource(NamedTuple):
    """Where the configuration comes from.

    ``project_dir`` is the directory relative report names resolve
    against: the config file's directory, or the search start when no
    file was found.
    """

    path: Path | None
    project_dir: Path


def locate_config(explicit: Path | None = None, start_dir: Path | None = None) -> ConfigSource:
    """Pick the config file: ``explicit`` if given, else the nearest
    gimbal-gate.yml at or above ``start_dir`` (default: cwd).

    An explicit path is returned as-is, even if it does not exist;
    load_config reports that.
    """
    start = (start_dir or Path.cwd()).resolve()
    if explicit is not None:
        return ConfigSource(explicit, explicit.resolve().parent)

    for directory in [start, *start.parents][:MAX_SEARCH_DEPTH]:
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return ConfigSource(candidate, directory)
    return ConfigSource(None, start)


def read_config_data(path: Path) -> dict[str, Any]:
    """Read the raw configuration mapping from a YAML file.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading gate config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    wrapped = data.get("gimbal")
    if isinstance(wrapped, dict):
        return wrapped
    return data


def load_config(path: Path | None = None) -> PluginConfig:
    """Load the gate configuration.

    Args:
        path: Explicit path to gimbal-gate.yml. If None, searches upward
            and falls back to the defaults when nothing is found.

    Returns:
        Merged, frozen PluginConfig.

    Raises:
        ConfigError: If an existing or explicitly named file is invalid.
    """
    if path is None:
        path = locate_config().path
        if path is None:
            logger.debug("No %s found; using defaults", CONFIG_FILE)
            return merge_config()

    config = merge_config(read_config_data(path))
    logger.info(
        "Loaded gate config from %s (bail=%s, audits=%s)",
        path,
        config.bail,
        ",".join(config.options.enabled_audits()) or "none",
    )
    return config
