"""
CLI command for browsing stack definitions.

Thin wrapper over ``devpack.core.use_cases.stacks``.
"""

from __future__ import annotations

import json

import click

from devpack.ui.cli.common import runtime_config


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def stacks(ctx: click.Context, as_json: bool) -> None:
    """List the stacks available in the stacks directory."""
    from devpack.core.use_cases.stacks import list_stacks

    config = runtime_config(ctx)
    result = list_stacks(config.stacks_dir)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not result.found_dir:
        click.secho(f"⚠️  Stacks directory not found: {result.stacks_dir}", fg="yellow")
        return

    if not result.stacks and not result.errors:
        click.secho(f"⚠️  No stack files in {result.stacks_dir}", fg="yellow")
        return

    click.secho(f"📦 Stacks ({result.stacks_dir}):", fg="cyan", bold=True)
    for stack in result.stacks.values():
        deps = f"  → {', '.join(stack.depends_on)}" if stack.depends_on else ""
        click.echo(f"   {stack.id:<20} {stack.name:<30} {len(stack.packages):>3} pkg{deps}")

    if result.errors:
        click.echo()
        click.secho(f"⚠️  {len(result.errors)} stack file(s) failed to load:", fg="yellow")
        for stack_id, message in result.errors.items():
            click.echo(f"   {stack_id}: {message}")
    click.echo()
