"""Adapters — bindings for the external tools the build drives.

Public re-exports for convenient access.
"""

from nativebuild.adapters.base import Adapter, ExecutionContext
from nativebuild.adapters.mock import MockAdapter
from nativebuild.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
