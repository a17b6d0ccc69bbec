"""
Stack loader — loads stack definitions from ``stacks/<id>.json``.

Every call reads and validates the file again; nothing is cached. The
executor calls it once per dependency edge it walks.

YAML definitions (``<id>.yaml`` / ``<id>.yml``) are accepted when no
JSON file exists for the id.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from functools import partial
from pathlib import Path

import yaml
from pydantic import ValidationError

from devpack.core.models.stack import Stack

logger = logging.getLogger(__name__)

STACK_SUFFIXES = (".json", ".yaml", ".yml")

_STACK_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")

# identifier → Stack, raising StackLoadError
StackLoader = Callable[[str], Stack]


class StackLoadError(Exception):
    """Raised when a stack definition is missing or malformed."""

    def __init__(self, stack_id: str, message: str):
        super().__init__(message)
        self.stack_id = stack_id


def stack_path(stacks_dir: Path, stack_id: str) -> Path | None:
    """Return the definition file for ``stack_id``, or None if there is none."""
    for suffix in STACK_SUFFIXES:
        candidate = stacks_dir / f"{stack_id}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def _read_definition(path: Path, stack_id: str) -> object:
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StackLoadError(stack_id, f"Could not read stack file: {path} ({e})") from e

    if path.suffix == ".json":
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StackLoadError(stack_id, f"Invalid JSON in {path}: {e}") from e

    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise StackLoadError(stack_id, f"Invalid YAML in {path}: {e}") from e


def load_stack(stack_id: str, stacks_dir: Path) -> Stack:
    """Load and validate a single stack definition.

    Args:
        stack_id: Stack identifier (file stem).
        stacks_dir: Directory holding the definitions.

    Returns:
        A freshly built Stack.

    Raises:
        StackLoadError: Missing file, bad JSON/YAML, failed validation,
            or an ``id`` that does not match the file name.
    """
    if not _STACK_ID_RE.match(stack_id):
        raise StackLoadError(stack_id, f"Invalid stack id: {stack_id!r}")

    path = stack_path(stacks_dir, stack_id)
    if path is None:
        raise StackLoadError(
            stack_id, f"Could not read stack file: {stacks_dir / (stack_id + '.json')}"
        )

    data = _read_definition(path, stack_id)
    if not isinstance(data, dict):
        raise StackLoadError(
            stack_id, f"Stack file {path} must contain an object, got {type(data).__name__}"
        )

    try:
        stack = Stack.model_validate(data)
    except ValidationError as e:
        raise StackLoadError(stack_id, f"Invalid stack definition in {path}: {e}") from e

    if stack.id != stack_id:
        raise StackLoadError(
            stack_id, f"Stack id '{stack.id}' in {path} does not match file name '{stack_id}'"
        )

    logger.debug("Loaded stack: %s (%d packages) from %s", stack.id, len(stack.packages), path)
    return stack


def make_loader(stacks_dir: Path) -> StackLoader:
    """Bind ``load_stack`` to a stacks directory."""
    return partial(_load_from, stacks_dir)


def _load_from(stacks_dir: Path, stack_id: str) -> Stack:
    return load_stack(stack_id, stacks_dir)


def discover_stacks(stacks_dir: Path) -> tuple[dict[str, Stack], dict[str, str]]:
    """Load every stack definition in a directory.

    Returns:
        ``(stacks, errors)`` — valid stacks keyed by id, and load error
        messages keyed by the file stem that failed.
    """
    stacks: dict[str, Stack] = {}
    errors: dict[str, str] = {}

    if not stacks_dir.is_dir():
        logger.debug("Stacks directory not found: %s", stacks_dir)
        return stacks, errors

    stems = sorted({
        child.stem
        for child in stacks_dir.iterdir()
        if child.is_file() and child.suffix in STACK_SUFFIXES
    })
    for stem in stems:
        try:
            stacks[stem] = load_stack(stem, stacks_dir)
        except StackLoadError as e:
            logger.warning("Skipping stack %s: %s", stem, e)
            errors[stem] = str(e)

    logger.info("Discovered %d stacks in %s", len(stacks), stacks_dir)
    return stacks, errors
