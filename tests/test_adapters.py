"""
Tests for audit runners — gimbal CLI runner and mock runner.
"""

import json
import sys
import textwrap
from pathlib import Path

import pytest

from gimbalgate.adapters.base import AuditRunnerError
from gimbalgate.adapters.gimbal import GimbalCliRunner, build_command, parse_results
from gimbalgate.adapters.mock import MockAuditRunner
from gimbalgate.core.models.results import AuditRun, Status

# ── Command line ─────────────────────────────────────────────────────


class TestBuildCommand:
    def test_flags_from_options(self, tmp_path: Path):
        out = tmp_path / "r.json"
        cmd = build_command(
            {
                "cwd": "/app/dist",
                "buildDir": "public",
                "checkThresholds": True,
                "lighthouse": False,
                "heapSnapshot": True,
            },
            out,
        )
        assert cmd[:2] == ["npx", "gimbal"]
        assert cmd[cmd.index("--cwd") + 1] == "/app/dist"
        assert cmd[cmd.index("--build-dir") + 1] == "public"
        assert "--check-thresholds" in cmd
        assert "--no-lighthouse" in cmd
        assert "--heap-snapshot" in cmd
        assert cmd[-2:] == ["--output-json", str(out)]

    def test_empty_build_dir_omitted(self, tmp_path: Path):
        cmd = build_command({"buildDir": ""}, tmp_path / "r.json", ("gimbal",))
        assert "--build-dir" not in cmd
        assert cmd[0] == "gimbal"


class TestParseResults:
    def test_valid(self, failing_size_tree: dict):
        run = parse_results(json.dumps(failing_size_tree))
        assert run.data[0].status is Status.FAILED

    def test_invalid_json(self):
        with pytest.raises(AuditRunnerError, match="Invalid audit results JSON"):
            parse_results("{not json")

    def test_wrong_shape(self):
        with pytest.raises(AuditRunnerError, match="Unexpected audit results shape"):
            parse_results(json.dumps({"data": [{"no_label": True}]}))


# ── Gimbal CLI runner ────────────────────────────────────────────────


def _fake_gimbal(tmp_path: Path, payload: dict | None, exit_code: int = 0) -> tuple[str, ...]:
    """A stand-in for the gimbal command that writes ``payload`` to --output-json."""
    script = tmp_path / "fake_gimbal.py"
    script.write_text(
        textwrap.dedent(f"""\
            import json, sys
            args = sys.argv[1:]
            payload = {payload!r}
            if payload is not None:
                with open(args[args.index("--output-json") + 1], "w") as f:
                    json.dump(payload, f)
            else:
                print("boom", file=sys.stderr)
            sys.exit({exit_code})
        """)
    )
    return (sys.executable, str(script))


class TestGimbalCliRunner:
    def test_command_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GIMBAL_GATE_RUNNER", "yarn gimbal")
        assert GimbalCliRunner().command == ("yarn", "gimbal")

    def test_default_command(self):
        assert GimbalCliRunner().command == ("npx", "gimbal")

    def test_unavailable(self):
        runner = GimbalCliRunner(command=("definitely-not-a-real-binary-xyz",))
        assert not runner.is_available()

    @pytest.mark.asyncio
    async def test_missing_binary_raises(self):
        runner = GimbalCliRunner(command=("definitely-not-a-real-binary-xyz",))
        with pytest.raises(AuditRunnerError, match="not found"):
            await runner.audit({})

    @pytest.mark.asyncio
    async def test_launch_error_raises(self, monkeypatch: pytest.MonkeyPatch):
        async def refuse(*args, **kwargs):
            raise PermissionError("permission denied")

        monkeypatch.setattr("gimbalgate.adapters.gimbal.asyncio.create_subprocess_exec", refuse)
        runner = GimbalCliRunner(command=(sys.executable,))
        with pytest.raises(AuditRunnerError, match="Cannot launch .*permission denied"):
            await runner.audit({})

    @pytest.mark.asyncio
    async def test_reads_results(self, tmp_path: Path, failing_size_tree: dict):
        # threshold failures: non-zero exit, results still written
        runner = GimbalCliRunner(command=_fake_gimbal(tmp_path, failing_size_tree, exit_code=1))
        run = await runner.audit({"cwd": str(tmp_path)})
        assert run.data[0].data[0].label == "main.js"

    @pytest.mark.asyncio
    async def test_no_results_raises(self, tmp_path: Path):
        runner = GimbalCliRunner(command=_fake_gimbal(tmp_path, None, exit_code=2))
        with pytest.raises(AuditRunnerError, match="boom"):
            await runner.audit({"cwd": str(tmp_path)})


# ── Mock runner ──────────────────────────────────────────────────────


class TestMockAuditRunner:
    @pytest.mark.asyncio
    async def test_default_success(self):
        mock = MockAuditRunner()
        run = await mock.audit({"cwd": "."})
        assert run.status is Status.PASSED
        assert mock.call_count == 1

    @pytest.mark.asyncio
    async def test_call_log(self):
        mock = MockAuditRunner()
        for i in range(3):
            await mock.audit({"cwd": f"/build/{i}"})
        assert mock.call_count == 3
        assert mock.call_log[0]["cwd"] == "/build/0"

    @pytest.mark.asyncio
    async def test_set_failure(self):
        mock = MockAuditRunner()
        mock.set_failure("Intentional failure")
        with pytest.raises(AuditRunnerError, match="Intentional failure"):
            await mock.audit({})

    def test_from_file(self, results_file: Path):
        mock = MockAuditRunner.from_file(results_file)
        assert mock.name == "file:results.json"

    def test_from_missing_file(self, tmp_path: Path):
        with pytest.raises(AuditRunnerError, match="Cannot read"):
            MockAuditRunner.from_file(tmp_path / "nope.json")

    def test_accepts_model(self):
        run = AuditRun(success=False)
        assert MockAuditRunner(run).is_available()

    def test_repr(self):
        assert repr(MockAuditRunner()) == "<MockAuditRunner name='mock'>"
