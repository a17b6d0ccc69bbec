"""
Domain models — Pydantic types for devpack.

All models are re-exported here for convenient access:

    from devpack.core.models import Stack, Package, CommandSpec, Action, Receipt
"""

from devpack.core.models.action import Action, Receipt
from devpack.core.models.command import CommandSpec, CommandVariant
from devpack.core.models.runtime import MAX_DEPTH, RuntimeConfig
from devpack.core.models.stack import Package, Stack

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # command.py
    "CommandSpec",
    "CommandVariant",
    # runtime.py
    "MAX_DEPTH",
    "RuntimeConfig",
    # stack.py
    "Package",
    "Stack",
]
