"""
Optimization bailout extraction — stats snapshot in, curated records out.

Reads the per-module ``optimizationBailout`` lists from a build stats
snapshot, drops the categories every build produces (third-party
dependencies, build-tool runtime modules, dynamic imports, HMR), and
serializes what is left for the report file.

The exclusion patterns are fixed. They are not user-configurable.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gimbalgate.core.models.bailout import BailoutRecord, ModuleStats

logger = logging.getLogger(__name__)

# Module names that point at dependencies or build-tool internals.
_NOISY_NAME_RE = re.compile(r"node_modules[\\/]|\(webpack\)|\(ignored\)|^multi")

# Reason text that shows up in every build with code splitting or HMR.
_NOISY_REASON_MARKERS = ("import()", "HMR")


# ── Extraction ──────────────────────────────────────────────────


def _iter_modules(stats: Mapping[str, Any] | Iterable[Any]) -> Iterable[Any]:
    if isinstance(stats, Mapping):
        modules = stats.get("modules") or []
        return modules if isinstance(modules, list) else []
    return stats


def _coerce_module(raw: Any) -> ModuleStats | None:
    if isinstance(raw, ModuleStats):
        return raw
    if not isinstance(raw, Mapping):
        return None
    try:
        return ModuleStats.model_validate(raw)
    except ValidationError as e:
        logger.debug("Skipping malformed module entry %r: %s", raw.get("name"), e)
        return None


def extract_bailout_records(stats: Mapping[str, Any] | Iterable[Any]) -> list[BailoutRecord]:
    """Collect a record for every module with a non-empty bailout list.

    Args:
        stats: A stats snapshot (``{"modules": [...]}``) or the module
            list itself.

    Returns:
        Records in snapshot order. Modules whose ``optimizationBailout``
        is missing, not a list, or empty are left out.
    """
    records: list[BailoutRecord] = []
    for raw in _iter_modules(stats):
        module = _coerce_module(raw)
        if module is None:
            continue
        reasons = module.optimization_bailout
        if not isinstance(reasons, list) or not reasons:
            continue
        records.append(
            BailoutRecord(
                name=module.name,
                reasons=[str(r) for r in reasons],
                chunks=module.chunks,
            )
        )
    return records


# ── Noise filter ────────────────────────────────────────────────


def is_noise_module(name: str) -> bool:
    """True for dependency, runtime, ignored and multi-entry modules."""
    return bool(_NOISY_NAME_RE.search(name))


def has_noise_reason(record: BailoutRecord) -> bool:
    """True when the serialized reasons/chunks mention import() or HMR."""
    text = json.dumps([record.reasons, record.chunks], default=str)
    return any(marker in text for marker in _NOISY_REASON_MARKERS)


def filter_bailout_records(records: Iterable[BailoutRecord]) -> list[BailoutRecord]:
    """Keep only records that pass both the name and the reason filter."""
    kept = [r for r in records if not is_noise_module(r.name) and not has_noise_reason(r)]
    logger.debug("Bailout filter kept %d record(s)", len(kept))
    return kept


def collect_bailouts(stats: Mapping[str, Any] | Iterable[Any]) -> list[BailoutRecord]:
    """Extract and filter in one go."""
    return filter_bailout_records(extract_bailout_records(stats))


# ── Serialization ───────────────────────────────────────────────


def serialize_bailout_records(records: Iterable[BailoutRecord]) -> str:
    """JSON array of ``[name, reasons, chunks]`` triples."""
    return json.dumps([r.as_triple() for r in records], indent=2, ensure_ascii=False, default=str)


def resolve_report_path(report_name: str, base_dir: Path | None = None) -> Path:
    """Resolve a report file name against the build context directory."""
    path = Path(report_name)
    if path.is_absolute() or base_dir is None:
        return path
    return base_dir / path
