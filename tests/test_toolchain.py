"""
Tests for toolchain probes and the doctor / stacks use cases.
"""

from pathlib import Path

import pytest

from devpack.adapters.mock import MockAdapter
from devpack.adapters.registry import AdapterRegistry
from devpack.core.models.runtime import RuntimeConfig
from devpack.core.services import toolchain
from devpack.core.services.toolchain import ToolchainReport, ToolStatus, probe_toolchain, version_line
from devpack.core.use_cases.doctor import run_doctor
from devpack.core.use_cases.stacks import list_stacks


@pytest.fixture
def fake_versions(monkeypatch):
    versions: dict[str, str] = {}
    monkeypatch.setattr(toolchain, "version_line", lambda argv: versions.get(argv[0]))
    return versions


class TestVersionLine:
    def test_missing_tool(self):
        assert version_line(["definitely-not-a-real-tool-xyz", "--version"]) is None


class TestProbes:
    def test_nothing_installed(self, fake_versions):
        report = probe_toolchain("linux")
        assert not any(t.found for t in report.tools)
        assert not report.web_dev.found

    def test_clang_counts_as_c_toolchain(self, fake_versions):
        fake_versions["clang"] = "clang version 17.0.6"
        assert report_tool(probe_toolchain("linux"), "C toolchain").details == "clang version 17.0.6"

    def test_node_without_npm(self, fake_versions):
        fake_versions["nodejs"] = "v18.19.0"
        tool = report_tool(probe_toolchain("linux"), "Node.js")
        assert tool.found
        assert "npm not found" in tool.details

    def test_windows_python_launcher(self, fake_versions):
        fake_versions["py"] = "Python 3.12.1"
        assert report_tool(probe_toolchain("windows"), "Python").found


class TestWebDev:
    def _report(self, *found: str) -> ToolchainReport:
        names = ["Git", "Node.js", "Docker"]
        return ToolchainReport(tools=[ToolStatus(n, found=n in found) for n in names])

    def test_needs_git_and_node(self):
        assert self._report("Git", "Node.js").web_dev.found
        assert not self._report("Git", "Docker").web_dev.found

    def test_docker_optional(self):
        assert "Docker optional" in self._report("Git", "Node.js").web_dev.details
        assert "Docker available" in self._report("Git", "Node.js", "Docker").web_dev.details


class TestUseCases:
    def test_list_stacks(self, write_stack, stacks_dir: Path):
        write_stack("base")
        (stacks_dir / "bad.json").write_text("[]")
        result = list_stacks(stacks_dir)
        assert result.found_dir
        assert list(result.stacks) == ["base"]
        assert "bad" in result.to_dict()["errors"]

    def test_doctor_problems(self, tmp_path: Path, registry, fake_versions):
        config = RuntimeConfig(platform="linux", stacks_dir=tmp_path / "missing")
        result = run_doctor(config, registry=registry)
        assert not result.healthy
        assert len(result.problems) == 2

    def test_doctor_reports_adapters(self, stacks_dir: Path, fake_versions):
        registry = AdapterRegistry()
        registry.register(MockAdapter(available=False))
        config = RuntimeConfig(platform="linux", package_manager="apt", stacks_dir=stacks_dir)

        result = run_doctor(config, registry=registry)

        assert result.to_dict()["adapters"]["shell"]["available"] is False
        assert result.problems == ["Adapter 'shell' is not available (no system shell)"]

    def test_doctor_windows_needs_no_manager(self, stacks_dir: Path, write_stack, registry, fake_versions):
        write_stack("base")
        result = run_doctor(RuntimeConfig(platform="windows", stacks_dir=stacks_dir), registry=registry)
        assert result.healthy
        assert result.to_dict()["stacks"]["loaded"] == 1


def report_tool(report: ToolchainReport, name: str) -> ToolStatus:
    tool = report.get(name)
    assert tool is not None
    return tool
