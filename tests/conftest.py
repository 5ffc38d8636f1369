"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def clean_mode_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests decide the build mode themselves."""
    monkeypatch.delenv("GIMBAL_GATE_MODE", raising=False)
    monkeypatch.delenv("NODE_ENV", raising=False)
    monkeypatch.delenv("GIMBAL_GATE_RUNNER", raising=False)


@pytest.fixture
def failing_size_tree() -> dict:
    """One failed report inside one failed job."""
    return {
        "data": [
            {
                "label": "size",
                "success": False,
                "data": [
                    {"label": "main.js", "value": "500kb", "threshold": "400kb", "success": False},
                ],
            }
        ]
    }


@pytest.fixture
def mixed_tree() -> dict:
    """Several jobs with passed, failed and unset results."""
    return {
        "success": False,
        "data": [
            {
                "label": "size",
                "success": False,
                "data": [
                    {"label": "main.js", "value": "500kb", "threshold": "400kb", "success": False},
                    {"label": "vendor.js", "value": "90kb", "threshold": "100kb", "success": True},
                    {"label": "app.css", "value": "30kb", "threshold": "20kb", "success": False},
                ],
            },
            {
                "label": "heap",
                "success": True,
                "data": [
                    {"label": "heap size", "value": "12mb", "threshold": "10mb", "success": False},
                ],
            },
            {
                "label": "lighthouse",
                "success": False,
                "data": [
                    {"label": "performance", "value": "42", "threshold": "75", "success": False},
                    {"label": "seo", "value": "90", "threshold": "80"},
                ],
            },
            {
                "label": "unused-source",
                "data": [
                    {"label": "main.js", "value": "60%", "threshold": "30%", "success": False},
                ],
            },
        ],
    }


@pytest.fixture
def stats_snapshot() -> dict:
    """A stats snapshot mixing real and noisy bailouts."""
    return {
        "modules": [
            {
                "name": "./src/app.js",
                "optimizationBailout": [
                    "ModuleConcatenation bailout: Module is not an ECMAScript module"
                ],
                "chunks": ["main"],
            },
            {
                "name": "node_modules/x/index.js",
                "optimizationBailout": ["Statement exit is unreachable"],
                "chunks": ["vendor"],
            },
            {
                "name": "(webpack)/buildin/global.js",
                "optimizationBailout": ["ModuleConcatenation bailout: Module is not an ECMAScript module"],
                "chunks": ["main"],
            },
            {
                "name": "./src/lazy.js",
                "optimizationBailout": ["ModuleConcatenation bailout: Module is referenced from import()"],
                "chunks": ["lazy"],
            },
            {"name": "./src/clean.js", "optimizationBailout": [], "chunks": ["main"]},
            {"name": "./src/plain.js", "chunks": ["main"]},
        ]
    }


@pytest.fixture
def results_file(tmp_path: Path, failing_size_tree: dict) -> Path:
    path = tmp_path / "results.json"
    path.write_text(json.dumps(failing_size_tree))
    return path


@pytest.fixture
def stats_file(tmp_path: Path, stats_snapshot: dict) -> Path:
    path = tmp_path / "stats.json"
    path.write_text(json.dumps(stats_snapshot))
    return path
