"""
Terminal rendering for install / verify runs.

``ProgressPrinter`` is the executor's notify callback: it prints each
step before its command runs, so command output streamed by the shell
adapter lands under the right heading.
"""

from __future__ import annotations

import click

from devpack.core.engine.executor import ExecutionEvent
from devpack.core.use_cases.run import RunResult


class ProgressPrinter:
    """Print executor events as an indented tree."""

    def __init__(self, verbose: bool = False):
        self._verbose = verbose

    def __call__(self, event: ExecutionEvent) -> None:
        handler = getattr(self, f"_on_{event.kind}", None)
        if handler is not None:
            handler(event)

    @staticmethod
    def _indent(event: ExecutionEvent) -> str:
        return "  " * event.stack.depth

    def _on_stack(self, event: ExecutionEvent) -> None:
        verb = "Verifying" if event.stack.mode == "verify" else "Installing"
        dry = " [dry-run]" if "dry-run" in event.stack.mode else ""
        click.secho(
            f"{self._indent(event)}{verb} stack: {event.stack.stack_name} ({event.stack.stack_id}){dry}",
            fg="cyan", bold=True,
        )

    def _on_skip(self, event: ExecutionEvent) -> None:
        pkg = event.package
        if pkg is None:
            return
        click.secho(f"{self._indent(event)}  [skip] {pkg.display_name} ({pkg.reason})", fg="yellow")

    def _on_command(self, event: ExecutionEvent) -> None:
        pkg = event.package
        if pkg is None:
            return
        pad = self._indent(event)
        if event.phase == "install" or event.stack.mode == "verify":
            click.echo(f"{pad}  Package: {pkg.display_name}")
        dry = "dry-run" in event.stack.mode
        if event.phase == "install":
            tag = "dry-run" if dry else "run"
        else:
            tag = "dry-run verify" if dry else "verify"
        click.echo(f"{pad}    [{tag}] {event.command}")

    def _on_result(self, event: ExecutionEvent) -> None:
        receipt = event.receipt
        if receipt is None or receipt.dry_run:
            return
        pad = self._indent(event)
        if receipt.ok:
            timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
            click.secho(f"{pad}    ✓ OK{timing}", fg="green")
            if self._verbose and receipt.output:
                for line in receipt.output.split("\n")[:10]:
                    click.echo(f"{pad}      │ {line}")
        elif receipt.failed:
            code = f" with code {receipt.return_code}" if receipt.return_code is not None else ""
            click.secho(f"{pad}    ✗ Command failed{code}", fg="red")
            if receipt.error and receipt.return_code is None:
                for line in receipt.error.split("\n")[:5]:
                    click.echo(f"{pad}      │ {line}")

    def _on_failure(self, event: ExecutionEvent) -> None:
        failure = event.failure
        if failure is None or failure.kind in ("command", "verification"):
            # already shown by _on_result
            return
        click.secho(f"{self._indent(event)}  ✗ {failure.message}", fg="red")

    def _on_abort(self, event: ExecutionEvent) -> None:
        click.secho(
            f"{self._indent(event)}  ⊘ Skipping packages of '{event.stack.stack_id}' "
            f"(dependency failure)",
            fg="yellow",
        )


def render_summary(result: RunResult) -> None:
    """Print the closing summary of a run."""
    report = result.report
    if report is None:
        return

    click.echo()
    failures = report.all_failures()
    counts = (
        f"{report.count('ok')} ok, {report.count('dry-run')} dry-run, "
        f"{report.count('failed')} failed, {report.count('skipped')} skipped"
    )
    if not failures:
        label = "All checks passed." if result.mode.kind == "verify" else "Done."
        click.secho(f"✅ {label} ({counts})", fg="green", bold=True)
        return

    click.secho(f"❌ {report.stack_id}: {len(failures)} failure(s) ({counts})", fg="red", bold=True)
    for failure in failures:
        click.echo(f"   • [{failure.stack_id}] {failure.message}")
