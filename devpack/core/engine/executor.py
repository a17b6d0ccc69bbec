"""
Engine executor — walks a stack's dependency tree and runs it.

For one stack, in order:

    depth check → dependencies (recursive, same mode) → own packages

Dependencies are loaded through the stack loader once per edge and are
never cached; a stack shared by two parents runs twice. Any failed
dependency stops the current stack before its own packages run. A
self-dependency is recorded and only that edge is skipped, unless it is
the stack's only dependency. Package failures are counted and do not
stop the remaining packages.

Depth is the length of the explicit path of stack ids from the root, so
a dependency cycle ends at the depth cap.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from devpack.adapters.registry import AdapterRegistry
from devpack.core.config.stack_loader import StackLoader, StackLoadError
from devpack.core.engine.command_resolver import resolve_package_command
from devpack.core.models.action import Action, Receipt
from devpack.core.models.runtime import RuntimeConfig
from devpack.core.models.stack import Package, Stack

logger = logging.getLogger(__name__)

FailureKind = Literal[
    "load",
    "self_dependency",
    "depth_exceeded",
    "dependency",
    "command",
    "verification",
]

PackageStatus = Literal["ok", "failed", "skipped", "dry-run"]


@dataclass(frozen=True)
class ExecutionMode:
    """``install`` (live or dry-run) or ``verify``."""

    kind: Literal["install", "verify"]
    dry_run: bool = False

    @classmethod
    def install(cls, dry_run: bool = False) -> ExecutionMode:
        return cls(kind="install", dry_run=dry_run)

    @classmethod
    def verify(cls) -> ExecutionMode:
        return cls(kind="verify")

    @property
    def label(self) -> str:
        if self.kind == "install" and self.dry_run:
            return "install (dry-run)"
        return self.kind


@dataclass
class Failure:
    """One recorded failure within a stack."""

    kind: FailureKind
    stack_id: str
    subject: str          # dependency id or package id
    message: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "stack": self.stack_id,
            "subject": self.subject,
            "message": self.message,
        }


@dataclass
class PackageOutcome:
    """What happened to one package."""

    package_id: str
    display_name: str
    status: PackageStatus = "skipped"
    command: str | None = None
    verify_command: str | None = None
    install_receipt: Receipt | None = None
    verify_receipt: Receipt | None = None
    reason: str = ""

    def to_dict(self) -> dict:
        result: dict = {
            "id": self.package_id,
            "display_name": self.display_name,
            "status": self.status,
            "command": self.command,
            "verify_command": self.verify_command,
        }
        if self.reason:
            result["reason"] = self.reason
        for key, receipt in (("install", self.install_receipt), ("verify", self.verify_receipt)):
            if receipt is not None:
                result[key] = receipt.model_dump(mode="json")
        return result


@dataclass
class StackReport:
    """Result of processing one stack (and, nested, its dependencies)."""

    stack_id: str
    stack_name: str = ""
    mode: str = ""
    path: list[str] = field(default_factory=list)
    dependencies: list[StackReport] = field(default_factory=list)
    packages: list[PackageOutcome] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)
    aborted: bool = False     # own packages were not attempted

    @property
    def depth(self) -> int:
        return max(len(self.path) - 1, 0)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return self.failure_count == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def fail(self, kind: FailureKind, subject: str, message: str) -> Failure:
        failure = Failure(kind=kind, stack_id=self.stack_id, subject=subject, message=message)
        self.failures.append(failure)
        return failure

    def iter_reports(self):
        """This report and every nested dependency report, pre-order."""
        yield self
        for dep in self.dependencies:
            yield from dep.iter_reports()

    def all_failures(self) -> list[Failure]:
        """Failures across the whole tree, innermost causes included."""
        return [f for r in self.iter_reports() for f in r.failures]

    def count(self, status: PackageStatus) -> int:
        return sum(1 for r in self.iter_reports() for p in r.packages if p.status == status)

    def to_dict(self) -> dict:
        return {
            "stack": self.stack_id,
            "name": self.stack_name,
            "mode": self.mode,
            "ok": self.ok,
            "failure_count": self.failure_count,
            "aborted": self.aborted,
            "path": list(self.path),
            "failures": [f.to_dict() for f in self.failures],
            "dependencies": [d.to_dict() for d in self.dependencies],
            "packages": [p.to_dict() for p in self.packages],
        }


@dataclass
class ExecutionEvent:
    """Progress notification for the caller (CLI output)."""

    kind: Literal["stack", "skip", "command", "result", "failure", "abort"]
    stack: StackReport
    package: PackageOutcome | None = None
    phase: Literal["install", "verify"] | None = None
    command: str = ""
    receipt: Receipt | None = None
    failure: Failure | None = None


Notify = Callable[[ExecutionEvent], None]


class StackExecutor:
    """Processes stacks against one runtime configuration.

    Args:
        loader: Stack loader used for every dependency edge.
        registry: Adapter registry that runs (or simulates) commands.
        config: Platform, package manager and depth cap for this run.
        notify: Optional progress callback.
    """

    def __init__(
        self,
        loader: StackLoader,
        registry: AdapterRegistry,
        config: RuntimeConfig,
        notify: Notify | None = None,
    ):
        self._loader = loader
        self._registry = registry
        self._config = config
        self._notify = notify

    def _emit(self, event: ExecutionEvent) -> None:
        if self._notify is not None:
            self._notify(event)

    def _record(self, report: StackReport, kind: FailureKind, subject: str, message: str) -> None:
        failure = report.fail(kind, subject, message)
        logger.debug("[%s] %s failure: %s", report.stack_id, kind, message)
        self._emit(ExecutionEvent(kind="failure", stack=report, failure=failure))

    # ── Tree walk ───────────────────────────────────────────────

    def process(
        self,
        stack: Stack,
        mode: ExecutionMode,
        path: tuple[str, ...] = (),
    ) -> StackReport:
        """Process ``stack`` and its dependencies.

        Args:
            stack: The stack to process.
            mode: Install (live or dry-run) or verify.
            path: Ids of the stacks above this one, root first.

        Returns:
            The stack's report; ``ok`` iff it recorded no failures.
        """
        report = StackReport(
            stack_id=stack.id,
            stack_name=stack.name,
            mode=mode.label,
            path=[*path, stack.id],
        )
        depth = len(path)

        if depth > self._config.max_depth:
            chain = " -> ".join(report.path)
            hint = " (cycle)" if stack.id in path else ""
            report.aborted = True
            self._record(
                report, "depth_exceeded", stack.id,
                f"Dependency chain deeper than {self._config.max_depth}{hint}: {chain}",
            )
            return report

        self._emit(ExecutionEvent(kind="stack", stack=report))
        logger.info("%s stack %s (depth %d)", mode.label, stack.id, depth)

        self._process_dependencies(stack, mode, path, report)

        if _blocks_packages(stack, report):
            report.aborted = True
            logger.info(
                "Stack %s: %d dependency failure(s), skipping its packages",
                stack.id, report.failure_count,
            )
            self._emit(ExecutionEvent(kind="abort", stack=report))
            return report

        for package in stack.packages:
            if mode.kind == "install":
                outcome = self._install_package(package, mode.dry_run, report)
            else:
                outcome = self._verify_package(package, report)
            report.packages.append(outcome)

        return report

    def _process_dependencies(
        self,
        stack: Stack,
        mode: ExecutionMode,
        path: tuple[str, ...],
        report: StackReport,
    ) -> None:
        child_path = (*path, stack.id)

        for dep_id in stack.depends_on:
            if dep_id == stack.id:
                self._record(
                    report, "self_dependency", dep_id,
                    f"Stack '{stack.id}' depends on itself",
                )
                continue

            try:
                dependency = self._loader(dep_id)
            except StackLoadError as e:
                self._record(
                    report, "load", dep_id,
                    f"Failed to load dependency '{dep_id}': {e}",
                )
                continue

            dep_report = self.process(dependency, mode, child_path)
            report.dependencies.append(dep_report)
            if not dep_report.ok:
                self._record(
                    report, "dependency", dep_id,
                    f"Dependency '{dep_id}' failed ({dep_report.failure_count} failure(s))",
                )

    # ── Packages ────────────────────────────────────────────────

    def _run(
        self,
        report: StackReport,
        outcome: PackageOutcome,
        phase: Literal["install", "verify"],
        command: str,
        dry_run: bool,
    ) -> Receipt:
        action = Action.for_package(
            report.stack_id, outcome.package_id, phase, command, name=outcome.display_name,
        )
        self._emit(ExecutionEvent(
            kind="command", stack=report, package=outcome, phase=phase, command=command,
        ))
        receipt = self._registry.execute_action(action, dry_run=dry_run)
        self._emit(ExecutionEvent(
            kind="result", stack=report, package=outcome, phase=phase,
            command=command, receipt=receipt,
        ))
        return receipt

    def _install_package(
        self,
        package: Package,
        dry_run: bool,
        report: StackReport,
    ) -> PackageOutcome:
        outcome = PackageOutcome(
            package_id=package.id,
            display_name=package.display_name,
            verify_command=package.verify_command,
        )

        command = resolve_package_command(
            package, self._config.platform, self._config.package_manager,
        )
        if command is None:
            outcome.reason = "no command for this platform"
            self._emit(ExecutionEvent(kind="skip", stack=report, package=outcome))
            return outcome
        outcome.command = command

        receipt = self._run(report, outcome, "install", command, dry_run)
        outcome.install_receipt = receipt

        if receipt.failed:
            outcome.status = "failed"
            self._record(
                report, "command", package.id,
                f"Install of '{package.display_name}' failed: {_describe(receipt)}",
            )
            return outcome

        if package.has_verify:
            verify = self._run(report, outcome, "verify", package.verify_command, dry_run)
            outcome.verify_receipt = verify
            if verify.failed:
                outcome.status = "failed"
                self._record(
                    report, "verification", package.id,
                    f"Verification of '{package.display_name}' failed: {_describe(verify)}",
                )
                return outcome

        outcome.status = "dry-run" if dry_run else "ok"
        return outcome

    def _verify_package(self, package: Package, report: StackReport) -> PackageOutcome:
        outcome = PackageOutcome(
            package_id=package.id,
            display_name=package.display_name,
            verify_command=package.verify_command,
        )

        if not package.has_verify:
            outcome.reason = "no verify command"
            self._emit(ExecutionEvent(kind="skip", stack=report, package=outcome))
            return outcome

        receipt = self._run(report, outcome, "verify", package.verify_command, dry_run=False)
        outcome.verify_receipt = receipt
        if receipt.failed:
            outcome.status = "failed"
            self._record(
                report, "verification", package.id,
                f"Verification of '{package.display_name}' failed: {_describe(receipt)}",
            )
        else:
            outcome.status = "ok"
        return outcome


def _describe(receipt: Receipt) -> str:
    if receipt.return_code is not None:
        return f"exit code {receipt.return_code}"
    return receipt.error or "unknown error"


def _blocks_packages(stack: Stack, report: StackReport) -> bool:
    """Whether the dependency loop's failures stop the stack's own packages."""
    if any(f.kind != "self_dependency" for f in report.failures):
        return True
    # a self-edge alone leaves nothing installed beneath the stack
    return stack.has_self_dependency and set(stack.depends_on) == {stack.id}
