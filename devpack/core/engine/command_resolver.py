"""
Command resolver — picks the concrete command for this host.

Two tiers:

1. Platform: ``windows`` uses the package's windows command. Every other
   platform is posix-like and uses its own key when the package has one,
   else the ``linux`` command.
2. Package manager (posix-like only): a ``tag: cmd | tag: cmd`` spec is
   narrowed to the variant tagged with the detected manager.

Nothing here probes the system; platform and manager come in as
arguments (see ``RuntimeConfig``).
"""

from __future__ import annotations

import logging

from devpack.core.models.command import CommandSpec
from devpack.core.models.stack import Package

logger = logging.getLogger(__name__)

WINDOWS = "windows"
POSIX_FALLBACK = "linux"


def select_platform_spec(package: Package, platform: str) -> CommandSpec | None:
    """Return the command spec that applies to ``platform``, if any."""
    if platform == WINDOWS:
        return package.command_for(WINDOWS)
    return package.command_for(platform) or package.command_for(POSIX_FALLBACK)


def resolve_spec(spec: CommandSpec, platform: str, package_manager: str | None) -> str:
    """Narrow a parsed spec to one command.

    Plain specs, Windows, and hosts without a known package manager get
    the raw string. When tags exist but none matches the manager the raw
    string is returned too; it is usually not runnable as is, so this is
    logged.
    """
    if platform == WINDOWS or spec.is_plain or not package_manager:
        return spec.raw

    command = spec.variant_for(package_manager)
    if command is None:
        logger.warning(
            "No '%s' variant in command (tags: %s); using it unmodified",
            package_manager, ", ".join(spec.tags),
        )
        return spec.raw
    return command


def resolve(raw_command: str, platform: str, package_manager: str | None) -> str:
    """Resolve a raw command string for the given platform and manager."""
    return resolve_spec(CommandSpec.parse(raw_command), platform, package_manager)


def resolve_package_command(
    package: Package,
    platform: str,
    package_manager: str | None,
) -> str | None:
    """Concrete install command for a package, or None to skip it."""
    spec = select_platform_spec(package, platform)
    if spec is None:
        return None
    command = resolve_spec(spec, platform, package_manager)
    return command if command.strip() else None
