"""
Stacks use case — list the stack definitions available to install.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from devpack.core.config.stack_loader import discover_stacks
from devpack.core.models.stack import Stack


@dataclass
class StacksResult:
    """Stack definitions found in the stacks directory."""

    stacks_dir: Path
    stacks: dict[str, Stack] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def found_dir(self) -> bool:
        return self.stacks_dir.is_dir()

    def to_dict(self) -> dict:
        return {
            "stacks_dir": str(self.stacks_dir),
            "stacks": [s.summary() for s in self.stacks.values()],
            "errors": dict(self.errors),
        }


def list_stacks(stacks_dir: Path) -> StacksResult:
    """Load every definition in ``stacks_dir``; broken files land in ``errors``."""
    stacks, errors = discover_stacks(stacks_dir)
    return StacksResult(stacks_dir=stacks_dir, stacks=stacks, errors=errors)
