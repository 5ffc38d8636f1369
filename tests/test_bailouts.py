"""
Tests for the bailout extraction pipeline — extraction, noise filter,
serialization.
"""

import json
from pathlib import Path

import pytest

from gimbalgate.core.models.bailout import BailoutRecord
from gimbalgate.core.services.bailouts import (
    collect_bailouts,
    extract_bailout_records,
    filter_bailout_records,
    has_noise_reason,
    is_noise_module,
    resolve_report_path,
    serialize_bailout_records,
)

CONCAT_REASON = "ModuleConcatenation bailout: Module is not an ECMAScript module"


class TestExtraction:
    def test_only_modules_with_reasons(self, stats_snapshot: dict):
        records = extract_bailout_records(stats_snapshot)
        names = [r.name for r in records]
        assert "./src/clean.js" not in names
        assert "./src/plain.js" not in names
        assert names == [
            "./src/app.js",
            "node_modules/x/index.js",
            "(webpack)/buildin/global.js",
            "./src/lazy.js",
        ]

    def test_non_list_reasons_dropped(self):
        stats = {
            "modules": [
                {"name": "./a.js", "optimizationBailout": "not a list"},
                {"name": "./b.js", "optimizationBailout": None},
                {"name": "./c.js", "optimizationBailout": {"0": "x"}},
            ]
        }
        assert extract_bailout_records(stats) == []

    def test_accepts_module_list(self):
        modules = [{"name": "./a.js", "optimizationBailout": ["why"], "chunks": [0]}]
        [record] = extract_bailout_records(modules)
        assert record.chunks == [0]

    def test_malformed_entries_skipped(self):
        stats = {"modules": ["not-a-dict", 42, {"name": "./a.js", "optimizationBailout": ["why"]}]}
        assert [r.name for r in extract_bailout_records(stats)] == ["./a.js"]

    def test_missing_modules_key(self):
        assert extract_bailout_records({}) == []
        assert extract_bailout_records({"modules": None}) == []


class TestNoiseFilter:
    @pytest.mark.parametrize(
        "name",
        [
            "node_modules/x/index.js",
            "./node_modules/react/index.js",
            "(webpack)/buildin/module.js",
            "(ignored) fs",
            "multi ./src/index.js",
            "multi-entry",
        ],
    )
    def test_noisy_names(self, name: str):
        assert is_noise_module(name)

    @pytest.mark.parametrize("name", ["./src/app.js", "./src/multi.js", "./lib/webpack-config.js"])
    def test_real_names(self, name: str):
        assert not is_noise_module(name)

    def test_import_reason_is_noise(self):
        record = BailoutRecord(name="./a.js", reasons=["Module is referenced from import()"], chunks=[])
        assert has_noise_reason(record)

    def test_hmr_reason_is_noise(self):
        record = BailoutRecord(name="./a.js", reasons=["HMR is enabled"], chunks=[])
        assert has_noise_reason(record)

    def test_chunks_text_is_checked(self):
        record = BailoutRecord(name="./a.js", reasons=["plain"], chunks=["HMR-runtime"])
        assert has_noise_reason(record)

    def test_dependency_excluded_regardless_of_reason(self):
        """Scenario D."""
        record = BailoutRecord(
            name="node_modules/x/index.js",
            reasons=["Statement exit is unreachable"],
            chunks=[],
        )
        assert filter_bailout_records([record]) == []

    def test_real_bailout_kept(self):
        """Scenario E."""
        stats = {
            "modules": [
                {"name": "./src/app.js", "optimizationBailout": [CONCAT_REASON], "chunks": ["main"]},
            ]
        }
        [record] = collect_bailouts(stats)
        assert record.as_triple() == ["./src/app.js", [CONCAT_REASON], ["main"]]

    def test_collect_from_snapshot(self, stats_snapshot: dict):
        assert [r.name for r in collect_bailouts(stats_snapshot)] == ["./src/app.js"]


class TestSerialization:
    def test_json_triples(self, stats_snapshot: dict):
        text = serialize_bailout_records(collect_bailouts(stats_snapshot))
        assert json.loads(text) == [["./src/app.js", [CONCAT_REASON], ["main"]]]

    def test_empty(self):
        assert json.loads(serialize_bailout_records([])) == []

    def test_resolve_relative(self, tmp_path: Path):
        assert resolve_report_path("b.json", tmp_path) == tmp_path / "b.json"

    def test_resolve_absolute(self, tmp_path: Path):
        target = tmp_path / "abs.json"
        assert resolve_report_path(str(target), Path("/elsewhere")) == target

    def test_resolve_without_base(self):
        assert resolve_report_path("b.json") == Path("b.json")
