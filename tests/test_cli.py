"""
Tests for CLI commands — install, verify, stacks, list, doctor, and global options.
"""

import json
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from devpack.core.engine.executor import ExecutionEvent, ExecutionMode, StackReport
from devpack.core.services import toolchain
from devpack.core.use_cases.run import RunResult
from devpack.main import cli
from devpack.ui.cli.render import ProgressPrinter, render_summary

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="runs POSIX shell commands")


@pytest.fixture
def invoke(tmp_path: Path, stacks_dir: Path):
    """Run the CLI pinned to linux/apt and the temp stacks directory."""
    cfg = tmp_path / "devpack.yml"
    cfg.write_text("platform: linux\n")

    def _invoke(*args: str):
        runner = CliRunner()
        return runner.invoke(
            cli,
            ["--config", str(cfg), "--stacks-dir", str(stacks_dir), "--package-manager", "apt", *args],
        )

    return _invoke


def _pkg(pkg_id: str, cmd: str, verify_cmd: str | None = None) -> dict:
    record = {"id": pkg_id, "display_name": pkg_id.title(), "linux_cmd": cmd}
    if verify_cmd is not None:
        record["verify_cmd"] = verify_cmd
    return record


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "install developer tool stacks" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_config_exits_1(self, tmp_path: Path):
        cfg = tmp_path / "devpack.yml"
        cfg.write_text("platform: linux\nmax_depth: -1\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(cfg), "--package-manager", "apt", "stacks"])
        assert result.exit_code == 1
        assert "Invalid devpack configuration" in result.output


class TestInstallCommand:
    def test_dry_run(self, invoke, write_stack):
        write_stack("base", packages=[_pkg("git", "apt: sudo apt install -y git | pacman: sudo pacman -S git")])
        write_stack("web", packages=[_pkg("node", "sudo apt install -y nodejs", "node --version")], depends_on=["base"])

        result = invoke("install", "web", "--dry-run")

        assert result.exit_code == 0, result.output
        assert "Installing stack: Web (web) [dry-run]" in result.output
        assert "[dry-run] sudo apt install -y git" in result.output
        assert "[dry-run verify] node --version" in result.output
        assert "Done." in result.output

    @posix_only
    def test_install_success(self, invoke, write_stack):
        write_stack("base", packages=[_pkg("ok", "true", "true")])

        result = invoke("install", "base")

        assert result.exit_code == 0, result.output
        assert "[run] true" in result.output
        assert "✓ OK" in result.output

    @posix_only
    def test_install_failure(self, invoke, write_stack):
        write_stack("base", packages=[_pkg("bad", "exit 4"), _pkg("ok", "true")])

        result = invoke("install", "base")

        assert result.exit_code == 1
        assert "Command failed with code 4" in result.output
        assert "1 failure(s)" in result.output

    def test_missing_stack(self, invoke):
        result = invoke("install", "ghost")
        assert result.exit_code == 1
        assert "Failed to load stack 'ghost'" in result.output

    def test_self_dependency(self, invoke, write_stack):
        write_stack("loop", depends_on=["loop"])

        result = invoke("install", "loop", "--dry-run")

        assert result.exit_code == 1
        assert "depends on itself" in result.output

    def test_json_output(self, invoke, write_stack):
        write_stack("base", packages=["git"])

        result = invoke("install", "base", "--dry-run", "--json")

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["mode"] == "install (dry-run)"
        assert data["report"]["packages"][0]["status"] == "dry-run"

    def test_json_missing_stack(self, invoke):
        result = invoke("install", "ghost", "--json")
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert "ghost" in data["error"]


class TestVerifyCommand:
    @posix_only
    def test_verify_pass(self, invoke, write_stack):
        write_stack("base", packages=[_pkg("a", "exit 9", "true"), _pkg("b", "exit 9")])

        result = invoke("verify", "base")

        assert result.exit_code == 0, result.output
        assert "Verifying stack" in result.output
        assert "exit 9" not in result.output
        assert "All checks passed." in result.output

    @posix_only
    def test_verify_fail(self, invoke, write_stack):
        write_stack("base", packages=[_pkg("a", "true", "false")])

        result = invoke("verify", "base")

        assert result.exit_code == 1
        assert "Verification of 'A' failed" in result.output


class TestStacksCommand:
    def test_lists_stacks(self, invoke, write_stack, stacks_dir: Path):
        write_stack("base", packages=["git", "curl"], name="Base Tools")
        write_stack("web", depends_on=["base"])
        (stacks_dir / "broken.json").write_text("{")

        result = invoke("stacks")

        assert result.exit_code == 0
        assert "Base Tools" in result.output
        assert "→ base" in result.output
        assert "broken" in result.output

    def test_json(self, invoke, write_stack):
        write_stack("base")

        result = invoke("stacks", "--json")

        data = json.loads(result.stdout)
        assert [s["id"] for s in data["stacks"]] == ["base"]
        assert data["errors"] == {}


class TestToolCommands:
    @pytest.fixture(autouse=True)
    def _fake_probes(self, monkeypatch):
        found = {"git": "git version 2.44.0", "node": "v20.11.0", "npm": "10.2.4"}
        monkeypatch.setattr(toolchain, "version_line", lambda argv: found.get(argv[0]))

    def test_list(self, invoke):
        result = invoke("list")
        assert result.exit_code == 0
        assert "[OK]" in result.output
        assert "Git -> git version 2.44.0" in result.output
        assert "[MISSING] Docker" in result.output
        assert "Web Dev" in result.output

    def test_list_json(self, invoke):
        data = json.loads(invoke("list", "--json").stdout)
        assert data["web_dev"]["found"] is True
        names = [t["name"] for t in data["tools"]]
        assert names == ["C toolchain", "Python", "Git", "Node.js", "Docker", "Rust"]

    def test_doctor_healthy(self, invoke, write_stack):
        write_stack("base")
        result = invoke("doctor")
        assert result.exit_code == 0, result.output
        assert "Package manager: apt" in result.output
        assert "Stacks loaded:   1" in result.output
        assert "Adapter:         shell (available)" in result.output

    def test_doctor_missing_stacks_dir(self, tmp_path: Path):
        cfg = tmp_path / "devpack.yml"
        cfg.write_text("platform: linux\n")
        runner = CliRunner()
        result = runner.invoke(cli, [
            "--config", str(cfg), "--stacks-dir", str(tmp_path / "nowhere"),
            "--package-manager", "apt", "doctor",
        ])
        assert result.exit_code == 1
        assert "Stacks directory not found" in result.output


class TestRender:
    def test_events_without_package_print_nothing(self, capsys):
        printer = ProgressPrinter()
        report = StackReport(stack_id="base", mode="install", path=["base"])
        printer(ExecutionEvent(kind="skip", stack=report))
        printer(ExecutionEvent(kind="command", stack=report, phase="install", command="x"))

        assert capsys.readouterr().out == ""

    def test_summary_without_report_prints_nothing(self, capsys, config):
        render_summary(RunResult(stack_id="ghost", mode=ExecutionMode.install(), config=config, error="x"))

        assert capsys.readouterr().out == ""
