"""
Adapter registry — central dispatch for command execution.

The executor never talks to adapters directly — always through the
registry, which also owns dry-run simulation: a dry-run action is
validated and answered with a skipped receipt, and the adapter's
``execute`` is never called.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from devpack.adapters.base import Adapter, ExecutionContext
from devpack.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Central registry and dispatcher for adapters."""

    def __init__(self, timeout: int | None = None, capture_output: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._timeout = timeout
        self._capture_output = capture_output

    def register(self, adapter: Adapter) -> None:
        """Register an adapter under its name."""
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """Get availability status of all registered adapters."""
        status = {}
        for name, adapter in self._adapters.items():
            try:
                available = adapter.is_available()
            except Exception:
                available = False
            status[name] = {
                "name": name,
                "available": available,
                "type": adapter.__class__.__name__,
            }
        return status

    def execute_action(self, action: Action, dry_run: bool = False) -> Receipt:
        """Execute an action through the appropriate adapter.

        1. Resolves the adapter
        2. Builds the execution context
        3. Validates the action
        4. Executes (or simulates, for dry runs)
        5. Returns a Receipt (never raises)
        """
        start_time = time.monotonic()

        context = ExecutionContext(
            action=action,
            dry_run=dry_run,
            timeout=self._timeout,
            capture_output=self._capture_output,
        )

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        try:
            is_valid, error_msg = adapter.validate(context)
        except Exception as e:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation error: {e}",
            )
        if not is_valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {error_msg}",
            )

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] {action.command}",
                metadata={"dry_run": True, "command": action.command},
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            # Adapters should never raise
            logger.error("Adapter %s raised during execution: %s", action.adapter, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        return receipt


def default_registry(timeout: int | None = None, capture_output: bool = False) -> AdapterRegistry:
    """Registry with the real shell adapter."""
    from devpack.adapters.shell.command import ShellCommandAdapter

    registry = AdapterRegistry(timeout=timeout, capture_output=capture_output)
    registry.register(ShellCommandAdapter())
    return registry
