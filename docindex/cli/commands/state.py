# docindex/cli/commands/state.py
"""
Inspect or reset fingerprint snapshots.

Usage:
    docindex state show
    docindex state clear --source handbook
    docindex state clear --yes
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from docindex.cli.ui import ui
from docindex.core.config import ConfigError, ConfigNotFoundError
from docindex.indexing.config import load_settings
from docindex.indexing.errors import SnapshotStoreError
from docindex.indexing.state import SnapshotStore


def _store(config: Optional[Path], state_dir: Optional[Path]) -> SnapshotStore:
    if state_dir is not None:
        return SnapshotStore(state_dir)
    try:
        settings = load_settings(config)
    except ConfigNotFoundError:
        if config is not None:
            raise
        # no settings file: fall back to the default state directory
        return SnapshotStore()
    return SnapshotStore(settings.resolved_state_dir())


def show(config: Optional[Path] = None, state_dir: Optional[Path] = None) -> None:
    try:
        store = _store(config, state_dir)
        snapshots = store.list_snapshots()
    except (ConfigError, SnapshotStoreError) as e:
        ui.error(str(e))
        raise typer.Exit(code=1)

    ui.header("docindex state", str(store.state_dir))

    if not snapshots:
        ui.info("No snapshots yet - run 'docindex index --incremental' first")
        return

    ui.table(
        "Snapshots",
        ["Source", "Documents", "Last updated"],
        [
            (s.source, str(s.document_count), s.last_updated.isoformat(timespec="seconds"))
            for s in snapshots
        ],
    )


def clear(
    config: Optional[Path] = None,
    state_dir: Optional[Path] = None,
    source: Optional[str] = None,
    yes: bool = False,
) -> None:
    try:
        store = _store(config, state_dir)
    except ConfigError as e:
        ui.error(str(e))
        raise typer.Exit(code=1)

    target = f"snapshot for {source!r}" if source else f"all snapshots in {store.state_dir}"
    if not yes and not typer.confirm(f"Delete {target}?"):
        ui.info("Aborted")
        raise typer.Exit(code=1)

    try:
        removed = store.clear(source)
    except SnapshotStoreError as e:
        ui.error(str(e))
        raise typer.Exit(code=1)

    ui.success(f"Removed {removed} snapshot(s)")
