"""
Toolchain probes — which common developer tools are on this machine.

Read-only: each probe runs ``<tool> --version`` and keeps the first line
of output. Used by ``devpack list`` and ``devpack doctor``; the install
engine does not depend on it.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_PROBE_TIMEOUT = 5


@dataclass
class ToolStatus:
    """Outcome of probing one tool."""

    name: str
    found: bool = False
    details: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "found": self.found, "details": self.details}


@dataclass
class ToolchainReport:
    """All probes plus the composite "Web Dev" check."""

    tools: list[ToolStatus] = field(default_factory=list)

    def get(self, name: str) -> ToolStatus | None:
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None

    def _found(self, name: str) -> bool:
        tool = self.get(name)
        return bool(tool and tool.found)

    @property
    def web_dev(self) -> ToolStatus:
        """Web development needs Git and Node.js; Docker is optional."""
        ok = self._found("Git") and self._found("Node.js")
        docker = "Docker available" if self._found("Docker") else "Docker optional"
        return ToolStatus(name="Web Dev", found=ok, details=f"needs Git + Node.js ({docker})")

    def to_dict(self) -> dict:
        return {
            "tools": [t.to_dict() for t in self.tools],
            "web_dev": self.web_dev.to_dict(),
        }


def version_line(argv: list[str]) -> str | None:
    """First output line of ``argv`` if it exits 0, else None."""
    if not shutil.which(argv[0]):
        return None
    try:
        r = subprocess.run(
            argv,
            capture_output=True, text=True, timeout=_PROBE_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Probe %s failed: %s", argv, e)
        return None
    if r.returncode != 0:
        return None
    # some tools (old python -V) print the version on stderr
    text = (r.stdout or r.stderr or "").strip()
    return text.splitlines()[0] if text else ""


def _first(candidates: list[list[str]]) -> str | None:
    for argv in candidates:
        line = version_line(argv)
        if line is not None:
            return line
    return None


def probe_c_toolchain() -> ToolStatus:
    line = _first([["gcc", "--version"], ["clang", "--version"]])
    if line is None:
        return ToolStatus("C toolchain", details="gcc/clang not found")
    return ToolStatus("C toolchain", found=True, details=line)


def probe_python(platform: str) -> ToolStatus:
    if platform == "windows":
        candidates = [["py", "-V"], ["python", "-V"], ["python3", "-V"]]
    else:
        candidates = [["python3", "--version"], ["python", "--version"]]
    line = _first(candidates)
    if line is None:
        return ToolStatus("Python", details="Python not found in PATH")
    return ToolStatus("Python", found=True, details=line)


def probe_git() -> ToolStatus:
    line = version_line(["git", "--version"])
    if line is None:
        return ToolStatus("Git", details="git not found in PATH")
    return ToolStatus("Git", found=True, details=line)


def probe_node(platform: str) -> ToolStatus:
    candidates = [["node", "--version"]]
    if platform != "windows":
        candidates.append(["nodejs", "--version"])
    node = _first(candidates)
    if node is None:
        return ToolStatus("Node.js", details="Node.js not found in PATH")
    npm = version_line(["npm", "--version"])
    details = f"{node} / npm {npm}" if npm is not None else f"{node} (npm not found)"
    return ToolStatus("Node.js", found=True, details=details)


def probe_docker() -> ToolStatus:
    line = version_line(["docker", "--version"])
    if line is None:
        return ToolStatus("Docker", details="Docker not found in PATH")
    return ToolStatus("Docker", found=True, details=line)


def probe_rust() -> ToolStatus:
    rustc = version_line(["rustc", "--version"])
    if rustc is None:
        return ToolStatus("Rust", details="rustc not found in PATH")
    cargo = version_line(["cargo", "--version"])
    details = f"{rustc} / {cargo}" if cargo is not None else f"{rustc} (cargo not found)"
    return ToolStatus("Rust", found=True, details=details)


def probe_toolchain(platform: str) -> ToolchainReport:
    """Run every probe, in display order."""
    return ToolchainReport(tools=[
        probe_c_toolchain(),
        probe_python(platform),
        probe_git(),
        probe_node(platform),
        probe_docker(),
        probe_rust(),
    ])
