# docindex/sources/__init__.py
"""
Documentation source adapters.

Public API:
    - SourceAdapter: Base class for adapters
    - SourceConfig / AuthConfig: Configured source
    - SearchOptions / HealthCheck / SourceMetadata: Adapter contract types
    - AdapterRegistry / default_registry: Source type -> adapter factory
"""

from .base import (
    AuthConfig,
    HealthCheck,
    SearchOptions,
    SourceAdapter,
    SourceConfig,
    SourceMetadata,
)
from .registry import (
    AdapterNotFoundError,
    AdapterRegistry,
    AdapterRegistryError,
    default_registry,
)

__all__ = [
    "AdapterNotFoundError",
    "AdapterRegistry",
    "AdapterRegistryError",
    "AuthConfig",
    "HealthCheck",
    "SearchOptions",
    "SourceAdapter",
    "SourceConfig",
    "SourceMetadata",
    "default_registry",
]
