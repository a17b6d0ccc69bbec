"""
Run use case — load a root stack by id and install or verify it.

The vertical slice behind ``devpack install`` and ``devpack verify``:
load the root definition, hand it to the installer or verifier, and
fold everything into one RunResult with an exit code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from devpack.adapters.registry import AdapterRegistry
from devpack.core.config.stack_loader import StackLoader, StackLoadError, make_loader
from devpack.core.engine.executor import ExecutionMode, Notify, StackReport
from devpack.core.models.runtime import RuntimeConfig
from devpack.core.use_cases.install import install_stack
from devpack.core.use_cases.verify import verify_stack

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of installing or verifying one root stack."""

    stack_id: str
    mode: ExecutionMode
    config: RuntimeConfig
    report: StackReport | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None and self.report.ok

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        result: dict = {
            "stack": self.stack_id,
            "mode": self.mode.label,
            "ok": self.ok,
            "runtime": self.config.to_dict(),
        }
        if self.error:
            result["error"] = self.error
        if self.report:
            result["report"] = self.report.to_dict()
            result["summary"] = {
                "failures": len(self.report.all_failures()),
                "ok": self.report.count("ok"),
                "dry_run": self.report.count("dry-run"),
                "failed": self.report.count("failed"),
                "skipped": self.report.count("skipped"),
            }
        return result


def run_stack(
    stack_id: str,
    mode: ExecutionMode,
    config: RuntimeConfig,
    *,
    registry: AdapterRegistry | None = None,
    loader: StackLoader | None = None,
    notify: Notify | None = None,
) -> RunResult:
    """Load ``stack_id`` and process it in ``mode``.

    A root load error is returned as ``error`` (exit code 1), never raised.
    """
    result = RunResult(stack_id=stack_id, mode=mode, config=config)
    loader = loader or make_loader(config.stacks_dir)

    try:
        stack = loader(stack_id)
    except StackLoadError as e:
        logger.debug("Root stack load failed: %s", e)
        result.error = f"Failed to load stack '{stack_id}': {e}"
        return result

    if mode.kind == "install":
        result.report = install_stack(
            stack, config, mode.dry_run,
            registry=registry, loader=loader, notify=notify,
        )
    else:
        result.report = verify_stack(
            stack, config,
            registry=registry, loader=loader, notify=notify,
        )

    logger.info(
        "%s %s finished: %s", mode.label, stack_id, "ok" if result.ok else "failed",
    )
    return result
