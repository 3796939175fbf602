# docindex/cli/commands/sources.py
"""
List configured sources and available adapter types.

Usage:
    docindex sources
    docindex sources --check    # also run each adapter's health check
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional, Tuple

import typer

from docindex.cli.ui import ui
from docindex.core.config import ConfigError
from docindex.indexing.config import IndexerSettings, load_settings
from docindex.sources.base import HealthCheck
from docindex.sources.registry import AdapterNotFoundError, default_registry


async def check_sources(settings: IndexerSettings) -> List[Tuple[str, Optional[HealthCheck], str]]:
    """Initialize each enabled source, run its health check, clean it up."""
    registry = default_registry()
    results: List[Tuple[str, Optional[HealthCheck], str]] = []

    for source_config in settings.sources:
        if not source_config.enabled:
            continue
        try:
            adapter = registry.create(source_config)
        except AdapterNotFoundError as e:
            results.append((source_config.name, None, str(e)))
            continue

        try:
            await adapter.initialize()
            health = await adapter.health_check()
        except Exception as e:
            results.append((source_config.name, None, f"{type(e).__name__}: {e}"))
        else:
            results.append((source_config.name, health, ""))
        finally:
            await adapter.cleanup()

    return results


def command(config: Optional[Path] = None, check: bool = False) -> None:
    try:
        settings = load_settings(config)
    except ConfigError as e:
        ui.error(str(e))
        raise typer.Exit(code=1)

    registry = default_registry()
    available = registry.available()

    ui.header("docindex sources", f"Adapters: {', '.join(available)}")

    if not settings.sources:
        ui.warning("No sources configured")
        return

    ui.table(
        "Configured sources",
        ["Name", "Type", "Location", "Enabled"],
        [
            (
                s.name,
                s.type if s.type in available else f"[red]{s.type} (unknown)[/red]",
                s.path or s.base_url or "-",
                "yes" if s.enabled else "[dim]no[/dim]",
            )
            for s in settings.sources
        ],
    )

    if not check:
        return

    ui.section("Health")
    for name, health, problem in asyncio.run(check_sources(settings)):
        if health is None:
            ui.error(f"{name}: {problem}")
        elif health.healthy:
            ui.success(f"{name} ({health.response_time_ms:.0f}ms)")
        else:
            ui.warning(f"{name} unhealthy", str(health.details.get("error", health.details)))
