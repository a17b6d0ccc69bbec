"""
devpack — CLI entrypoint.

Usage:
    devpack install <stack-id> [--dry-run]
    devpack verify <stack-id>
    devpack stacks [--json]
    devpack list [--json]
    devpack doctor
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from devpack import __version__
from devpack.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="devpack")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to devpack.yml (default: auto-detect).",
)
@click.option(
    "--stacks-dir",
    "-s",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding <id>.json stack files (default: nearest stacks/).",
)
@click.option(
    "--package-manager",
    "package_manager",
    default=None,
    help="Use this package manager's command variants instead of detecting one.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    stacks_dir: str | None,
    package_manager: str | None,
) -> None:
    """devpack — install developer tool stacks."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["stacks_dir"] = Path(stacks_dir) if stacks_dir else None
    ctx.obj["package_manager"] = package_manager

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


def _run(ctx: click.Context, stack_id: str, mode, as_json: bool) -> None:
    from devpack.adapters.registry import default_registry
    from devpack.core.use_cases.run import run_stack
    from devpack.ui.cli.common import runtime_config
    from devpack.ui.cli.render import ProgressPrinter, render_summary

    config = runtime_config(ctx)
    quiet = ctx.obj.get("quiet", False)

    notify = None
    if not as_json and not quiet:
        notify = ProgressPrinter(verbose=ctx.obj.get("verbose", False))

    result = run_stack(
        stack_id,
        mode,
        config,
        # JSON mode keeps command output off stdout
        registry=default_registry(timeout=config.command_timeout, capture_output=as_json),
        notify=notify,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    render_summary(result)
    sys.exit(result.exit_code)


@cli.command()
@click.argument("stack_id")
@click.option("--dry-run", is_flag=True, help="Print commands without running them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, stack_id: str, dry_run: bool, as_json: bool) -> None:
    """Install a stack and the stacks it depends on.

    Examples:

        devpack install python

        devpack install web --dry-run
    """
    from devpack.core.engine.executor import ExecutionMode

    _run(ctx, stack_id, ExecutionMode.install(dry_run=dry_run), as_json)


@cli.command()
@click.argument("stack_id")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def verify(ctx: click.Context, stack_id: str, as_json: bool) -> None:
    """Run the verify commands of a stack and its dependencies."""
    from devpack.core.engine.executor import ExecutionMode

    _run(ctx, stack_id, ExecutionMode.verify(), as_json)


# ── Sub-command modules ─────────────────────────────────────────

from devpack.ui.cli.doctor import doctor, list_tools  # noqa: E402
from devpack.ui.cli.stacks import stacks  # noqa: E402

cli.add_command(stacks)
cli.add_command(list_tools)
cli.add_command(doctor)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
