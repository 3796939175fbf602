# docindex/sources/registry.py
"""
Source adapter registry.

Maps SourceConfig.type to an adapter factory. Built-in adapters in
docindex.sources.plugins are discovered lazily on first use: every public
SourceAdapter subclass with a non-empty source_type is registered.

Usage:
    registry = default_registry()
    adapter = registry.create(source_config)

    # Tests and extensions can register their own factories
    registry.register("fake", FakeAdapter)
"""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from typing import Any, Callable, Dict, List, Optional

from docindex.logging.logger import get_logger
from docindex.logging.tags import SOURCE

from .base import SourceAdapter, SourceConfig

logger = get_logger(__name__)

AdapterFactory = Callable[..., SourceAdapter]

PLUGINS_PACKAGE = "docindex.sources.plugins"


# =============================================================================
# Exceptions
# =============================================================================


class AdapterRegistryError(Exception):
    """Base error for adapter registry operations."""

    pass


class AdapterNotFoundError(AdapterRegistryError):
    """Raised when no adapter is registered for a source type."""

    pass


# =============================================================================
# AdapterRegistry
# =============================================================================


class AdapterRegistry:
    """
    Registry of adapter factories keyed by source type.

    Args:
        scan_packages: Packages scanned for SourceAdapter subclasses on first use
    """

    def __init__(self, scan_packages: Optional[List[str]] = None) -> None:
        self._scan_packages = list(scan_packages or [])
        self._factories: Dict[str, AdapterFactory] = {}
        self._discovered = not self._scan_packages

    def register(self, source_type: str, factory: AdapterFactory) -> None:
        """Register (or replace) the factory for a source type."""
        key = source_type.strip().lower()
        if key in self._factories and self._factories[key] is not factory:
            logger.debug(f"{SOURCE} Replacing adapter factory for {key!r}")
        self._factories[key] = factory
        logger.debug(f"{SOURCE} Registered adapter: {key!r}")

    def get(self, source_type: str) -> AdapterFactory:
        """Get the factory for a source type."""
        self._ensure_discovered()

        key = source_type.strip().lower()
        if key not in self._factories:
            raise AdapterNotFoundError(
                f"Unknown source type: {source_type!r}. Available: {self.available()}"
            )
        return self._factories[key]

    def create(self, config: SourceConfig, **kwargs: Any) -> SourceAdapter:
        """Build an adapter for a configured source."""
        return self.get(config.type)(config, **kwargs)

    def available(self) -> List[str]:
        """List registered source types."""
        self._ensure_discovered()
        return sorted(self._factories.keys())

    def __contains__(self, source_type: str) -> bool:
        self._ensure_discovered()
        return source_type.strip().lower() in self._factories

    def _ensure_discovered(self) -> None:
        """Run auto-discovery if not already done."""
        if self._discovered:
            return

        self._discovered = True
        for package_name in self._scan_packages:
            package = importlib.import_module(package_name)
            self._scan_package(package)

        logger.debug(
            f"{SOURCE} Discovered {len(self._factories)} adapter(s): {sorted(self._factories)}"
        )

    def _scan_package(self, package: Any) -> None:
        """Scan a package for adapter classes (non-recursive)."""
        package_path = getattr(package, "__path__", None)
        if not package_path:
            return

        for _, modname, ispkg in pkgutil.iter_modules(package_path, prefix=f"{package.__name__}."):
            if ispkg:
                continue
            self._scan_module(importlib.import_module(modname))

    def _scan_module(self, module: Any) -> None:
        """Register adapter classes defined in a module."""
        for name, obj in inspect.getmembers(module, inspect.isclass):
            if name.startswith("_") or obj.__module__ != module.__name__:
                continue
            if not issubclass(obj, SourceAdapter) or inspect.isabstract(obj):
                continue
            if not obj.source_type:
                continue
            # explicit registrations win over discovery
            if obj.source_type not in self._factories:
                self.register(obj.source_type, obj)


def default_registry() -> AdapterRegistry:
    """A fresh registry that discovers the built-in adapters."""
    return AdapterRegistry(scan_packages=[PLUGINS_PACKAGE])


__all__ = [
    "AdapterFactory",
    "AdapterNotFoundError",
    "AdapterRegistry",
    "AdapterRegistryError",
    "default_registry",
]
