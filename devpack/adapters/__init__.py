"""Adapters — command runners the executor dispatches to.

Public re-exports for convenient access.
"""

from devpack.adapters.base import Adapter, ExecutionContext
from devpack.adapters.mock import MockAdapter
from devpack.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
