"""
Host detection — platform and local package manager.

Read-only probes. The results feed ``RuntimeConfig`` once per run; the
command resolver never probes on its own.
"""

from __future__ import annotations

import logging
import platform as _platform
import shutil
from collections.abc import Callable

logger = logging.getLogger(__name__)

# Probe order matters: the first manager found wins.
KNOWN_PACKAGE_MANAGERS: tuple[str, ...] = (
    "pacman",
    "apt",
    "dnf",
    "yum",
    "zypper",
    "brew",
)

_PLATFORM_ALIASES = {
    "darwin": "macos",
    "win32": "windows",
    "cygwin": "windows",
}


def detect_platform(system: str | None = None) -> str:
    """Return the platform key used in stack files.

    ``Windows`` → ``windows``, ``Linux`` → ``linux``,
    ``Darwin`` → ``macos``; anything else is lower-cased as is.
    """
    name = (system if system is not None else _platform.system()).lower()
    return _PLATFORM_ALIASES.get(name, name) or "unknown"


def detect_package_manager(
    which: Callable[[str], str | None] = shutil.which,
    candidates: tuple[str, ...] = KNOWN_PACKAGE_MANAGERS,
) -> str | None:
    """Return the first known package manager found on PATH.

    Args:
        which: Executable lookup, ``shutil.which`` by default.
        candidates: Manager names in priority order.

    Returns:
        The manager name, or None when none is installed.
    """
    for name in candidates:
        if which(name):
            logger.debug("Package manager detected: %s", name)
            return name
    logger.debug("No known package manager found (%s)", ", ".join(candidates))
    return None
