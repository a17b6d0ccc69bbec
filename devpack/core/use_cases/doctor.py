"""
Doctor use case — can devpack do its job on this machine?

Reports the runtime facts the engine will use (platform, package
manager, stacks directory, command adapters) next to the toolchain
probes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from devpack.adapters.registry import AdapterRegistry, default_registry
from devpack.core.config.stack_loader import discover_stacks
from devpack.core.models.runtime import RuntimeConfig
from devpack.core.services.toolchain import ToolchainReport, probe_toolchain


@dataclass
class DoctorResult:
    """Environment diagnosis."""

    config: RuntimeConfig
    toolchain: ToolchainReport
    adapters: dict[str, dict[str, Any]] = field(default_factory=dict)
    stack_count: int = 0
    broken_stacks: list[str] = field(default_factory=list)

    @property
    def problems(self) -> list[str]:
        problems = []
        if self.config.posix_like and not self.config.package_manager:
            problems.append("No supported package manager found")
        if not self.config.stacks_dir.is_dir():
            problems.append(f"Stacks directory not found: {self.config.stacks_dir}")
        for name, status in self.adapters.items():
            if not status["available"]:
                problems.append(f"Adapter '{name}' is not available (no system shell)")
        return problems

    @property
    def warnings(self) -> list[str]:
        return [f"Stack '{s}' failed to load" for s in self.broken_stacks]

    @property
    def healthy(self) -> bool:
        return not self.problems

    def to_dict(self) -> dict:
        return {
            "healthy": self.healthy,
            "runtime": self.config.to_dict(),
            "adapters": self.adapters,
            "stacks": {"loaded": self.stack_count, "broken": list(self.broken_stacks)},
            "problems": self.problems,
            "warnings": self.warnings,
            "toolchain": self.toolchain.to_dict(),
        }


def run_doctor(config: RuntimeConfig, registry: AdapterRegistry | None = None) -> DoctorResult:
    """Diagnose the environment described by ``config``."""
    registry = registry or default_registry(timeout=config.command_timeout)
    stacks, errors = discover_stacks(config.stacks_dir)
    return DoctorResult(
        config=config,
        toolchain=probe_toolchain(config.platform),
        adapters=registry.adapter_status(),
        stack_count=len(stacks),
        broken_stacks=sorted(errors),
    )
