"""
Runtime configuration — the facts a run is executed against.

Built once at startup (config file + env + flags + detection) and then
passed explicitly to the resolver and executor. Nothing downstream
re-detects the platform or the package manager.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

# Deepest allowed dependency chain (root stack is depth 0).
MAX_DEPTH = 16


class RuntimeConfig(BaseModel):
    """Resolved settings for one devpack run."""

    platform: str
    package_manager: str | None = None
    stacks_dir: Path = Path("stacks")
    max_depth: int = Field(default=MAX_DEPTH, ge=0)
    command_timeout: int | None = Field(default=None, gt=0)

    @property
    def posix_like(self) -> bool:
        return self.platform != "windows"

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "package_manager": self.package_manager,
            "stacks_dir": str(self.stacks_dir),
            "max_depth": self.max_depth,
            "command_timeout": self.command_timeout,
        }
