"""
CLI commands for environment checks: ``devpack list`` and ``devpack doctor``.

Thin wrappers over ``devpack.core.services.toolchain`` and
``devpack.core.use_cases.doctor``.
"""

from __future__ import annotations

import json
import sys

import click

from devpack.core.services.toolchain import ToolchainReport, ToolStatus
from devpack.ui.cli.common import runtime_config


def _echo_tool(tool: ToolStatus) -> None:
    if tool.found:
        click.secho("   [OK]      ", fg="green", nl=False)
    else:
        click.secho("   [MISSING] ", fg="red", nl=False)
    click.echo(f"{tool.name} -> {tool.details}")


def _echo_toolchain(report: ToolchainReport) -> None:
    for tool in report.tools:
        _echo_tool(tool)
    _echo_tool(report.web_dev)


@click.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_tools(ctx: click.Context, as_json: bool) -> None:
    """Show which common developer tools are installed."""
    from devpack.core.services.toolchain import probe_toolchain

    config = runtime_config(ctx)
    report = probe_toolchain(config.platform)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.secho("🔧 Toolchain:", fg="cyan", bold=True)
    _echo_toolchain(report)
    click.echo()


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def doctor(ctx: click.Context, as_json: bool) -> None:
    """Check that devpack can install stacks on this machine."""
    from devpack.core.use_cases.doctor import run_doctor

    config = runtime_config(ctx)
    result = run_doctor(config)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.healthy else 1)

    click.secho("🩺 Runtime:", fg="cyan", bold=True)
    click.echo(f"   Platform:        {config.platform}")
    click.echo(f"   Package manager: {config.package_manager or '(none)'}")
    click.echo(f"   Stacks dir:      {config.stacks_dir}")
    click.echo(f"   Stacks loaded:   {result.stack_count}")
    for name, status in result.adapters.items():
        state = "available" if status["available"] else "missing"
        click.echo(f"   Adapter:         {name} ({state})")
    click.echo()

    click.secho("🔧 Toolchain:", fg="cyan", bold=True)
    _echo_toolchain(result.toolchain)
    click.echo()

    for warning in result.warnings:
        click.secho(f"⚠️  {warning}", fg="yellow")
    for problem in result.problems:
        click.secho(f"❌ {problem}", fg="red")

    if not result.healthy:
        sys.exit(1)
    click.secho("✅ Ready to install stacks", fg="green")
