"""
Configuration loader — builds the RuntimeConfig for a run.

Sources, lowest to highest precedence:

    defaults  <  devpack.yml  <  DEVPACK_* env vars  <  CLI flags

Platform and package manager are detected here, once, unless the config
file pins them.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from devpack.core.models.runtime import RuntimeConfig
from devpack.core.services.detection import detect_package_manager, detect_platform

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "devpack.yml"

# Default stack definitions directory name
STACKS_DIR_NAME = "stacks"

ENV_STACKS_DIR = "DEVPACK_STACKS_DIR"

_CONFIG_KEYS = ("stacks_dir", "max_depth", "package_manager", "platform", "command_timeout")


class ConfigError(Exception):
    """Raised when devpack configuration is invalid."""


def _walk_up(start_dir: Path | None, name: str, want_dir: bool) -> Path | None:
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / name
        if (candidate.is_dir() if want_dir else candidate.is_file()):
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for devpack.yml starting from the given directory, walking up."""
    return _walk_up(start_dir, CONFIG_FILE, want_dir=False)


def find_stacks_dir(start_dir: Path | None = None) -> Path | None:
    """Search for a ``stacks/`` directory starting from the given directory, walking up."""
    return _walk_up(start_dir, STACKS_DIR_NAME, want_dir=True)


def load_config_file(path: Path) -> dict[str, Any]:
    """Read devpack.yml into a plain dict of known keys.

    Relative ``stacks_dir`` values are resolved against the file's directory.

    Raises:
        ConfigError: If the file is unreadable, not YAML, or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    unknown = sorted(set(data) - set(_CONFIG_KEYS))
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", path, ", ".join(unknown))

    settings = {k: data[k] for k in _CONFIG_KEYS if k in data}
    if settings.get("stacks_dir"):
        stacks_dir = Path(str(settings["stacks_dir"])).expanduser()
        if not stacks_dir.is_absolute():
            stacks_dir = path.parent.resolve() / stacks_dir
        settings["stacks_dir"] = stacks_dir
    return settings


def build_runtime_config(
    config_path: Path | None = None,
    stacks_dir: Path | None = None,
    *,
    platform: str | None = None,
    package_manager: str | None = None,
    detect_pm: Callable[[], str | None] = detect_package_manager,
) -> RuntimeConfig:
    """Assemble the RuntimeConfig for this run.

    Args:
        config_path: Explicit devpack.yml. If None, searches upward.
        stacks_dir: ``--stacks-dir`` override.
        platform: Platform override (tests, cross-checks).
        package_manager: Package manager override.
        detect_pm: Package-manager probe, called at most once.

    Raises:
        ConfigError: If the config file or any resulting value is invalid.
    """
    if config_path is None:
        config_path = find_config_file()
    settings = load_config_file(config_path) if config_path else {}

    env_dir = os.environ.get(ENV_STACKS_DIR)
    if stacks_dir is not None:
        settings["stacks_dir"] = stacks_dir
    elif env_dir:
        settings["stacks_dir"] = Path(env_dir).expanduser()
    elif "stacks_dir" not in settings:
        settings["stacks_dir"] = find_stacks_dir() or Path.cwd() / STACKS_DIR_NAME

    if platform:
        settings["platform"] = platform
    elif not settings.get("platform"):
        settings["platform"] = detect_platform()

    if package_manager:
        settings["package_manager"] = package_manager
    elif not settings.get("package_manager") and settings["platform"] != "windows":
        settings["package_manager"] = detect_pm()

    try:
        config = RuntimeConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigError(f"Invalid devpack configuration: {e}") from e

    logger.info(
        "Runtime: platform=%s package_manager=%s stacks_dir=%s",
        config.platform, config.package_manager or "-", config.stacks_dir,
    )
    return config
