"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import sys

import click

from devpack.core.config.loader import ConfigError, build_runtime_config
from devpack.core.models.runtime import RuntimeConfig


def runtime_config(ctx: click.Context) -> RuntimeConfig:
    """Build the RuntimeConfig for this invocation, or exit 1 on bad config."""
    try:
        return build_runtime_config(
            config_path=ctx.obj.get("config_path"),
            stacks_dir=ctx.obj.get("stacks_dir"),
            package_manager=ctx.obj.get("package_manager"),
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
