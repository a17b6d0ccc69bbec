"""
Verify use case — run verify commands only, dependencies first.

Install commands are never run here. Packages without a verify command
are skipped, so a tree with no verify commands at all passes.
"""

from __future__ import annotations

from devpack.adapters.registry import AdapterRegistry, default_registry
from devpack.core.config.stack_loader import StackLoader, make_loader
from devpack.core.engine.executor import ExecutionMode, Notify, StackExecutor, StackReport
from devpack.core.models.runtime import RuntimeConfig
from devpack.core.models.stack import Stack


def verify_stack(
    stack: Stack,
    config: RuntimeConfig,
    *,
    registry: AdapterRegistry | None = None,
    loader: StackLoader | None = None,
    notify: Notify | None = None,
) -> StackReport:
    """Verify ``stack`` and its dependency stacks."""
    executor = StackExecutor(
        loader=loader or make_loader(config.stacks_dir),
        registry=registry or default_registry(timeout=config.command_timeout),
        config=config,
        notify=notify,
    )
    return executor.process(stack, ExecutionMode.verify())


def verify(stack: Stack, config: RuntimeConfig, **kwargs) -> int:
    """Verify and return a process exit code (0 ok, 1 any failure)."""
    return verify_stack(stack, config, **kwargs).exit_code
