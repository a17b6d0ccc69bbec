"""
Install use case — run a stack's install commands, dependencies first.
"""

from __future__ import annotations

from devpack.adapters.registry import AdapterRegistry, default_registry
from devpack.core.config.stack_loader import StackLoader, make_loader
from devpack.core.engine.executor import ExecutionMode, Notify, StackExecutor, StackReport
from devpack.core.models.runtime import RuntimeConfig
from devpack.core.models.stack import Stack


def install_stack(
    stack: Stack,
    config: RuntimeConfig,
    dry_run: bool = False,
    *,
    registry: AdapterRegistry | None = None,
    loader: StackLoader | None = None,
    notify: Notify | None = None,
) -> StackReport:
    """Install ``stack`` and its dependency stacks.

    With ``dry_run`` every command is reported but none is executed.
    """
    executor = StackExecutor(
        loader=loader or make_loader(config.stacks_dir),
        registry=registry or default_registry(timeout=config.command_timeout),
        config=config,
        notify=notify,
    )
    return executor.process(stack, ExecutionMode.install(dry_run=dry_run))


def install(stack: Stack, config: RuntimeConfig, dry_run: bool = False, **kwargs) -> int:
    """Install and return a process exit code (0 ok, 1 any failure)."""
    return install_stack(stack, config, dry_run, **kwargs).exit_code
