# docindex/cli/commands/index.py
"""
Index command.

Usage:
    docindex index                         # Full run over every source
    docindex index --incremental           # Only changed documents
    docindex index -s handbook --dry-run   # Count changes, touch nothing
    docindex index --output report.json    # Also write the JSON report
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer

from docindex.cli.ui import ui
from docindex.core.config import ConfigError
from docindex.indexing.config import IndexerSettings, RunOptions, build_run_options, load_settings
from docindex.indexing.errors import FatalIndexingError
from docindex.indexing.indexer import DocumentationIndexer
from docindex.indexing.progress import ProgressTracker
from docindex.indexing.report import IndexingReport
from docindex.logging.logger import VERBOSE_FORMAT, configure_logging, get_logger
from docindex.logging.tags import CLI

logger = get_logger(__name__)


async def run_indexing(settings: IndexerSettings, options: RunOptions) -> IndexingReport:
    """Run one indexing pass with a fresh progress tracker."""
    progress = ProgressTracker(verbose=options.verbose)
    async with DocumentationIndexer(settings, options, progress=progress) as indexer:
        return await indexer.index_all_sources()


def write_report(report: IndexingReport, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    logger.info(f"{CLI} Wrote report to {output}")


def command(
    config: Optional[Path] = None,
    sources: Optional[List[str]] = None,
    parallel: Optional[bool] = None,
    batch_size: Optional[int] = None,
    dry_run: Optional[bool] = None,
    incremental: Optional[bool] = None,
    since: Optional[str] = None,
    show_changes: Optional[bool] = None,
    verbose: bool = False,
    output: Optional[Path] = None,
    as_json: bool = False,
) -> None:
    """Run the indexer and render its report."""
    if verbose:
        configure_logging(logging.DEBUG, VERBOSE_FORMAT)
    else:
        configure_logging(logging.WARNING)

    try:
        settings = load_settings(config)
        options = build_run_options(
            settings,
            sources=sources or None,
            parallel=parallel,
            batch_size=batch_size,
            dry_run=dry_run,
            incremental=incremental,
            since=since,
            show_changes=show_changes,
            verbose=verbose or None,
        )
    except ConfigError as e:
        ui.error(str(e))
        raise typer.Exit(code=1)

    if not as_json:
        selected = options.sources or [s.name for s in settings.sources if s.enabled]
        ui.header("docindex index", f"{len(selected)} source(s): {', '.join(selected)}")

    try:
        report = asyncio.run(run_indexing(settings, options))
    except FatalIndexingError as e:
        ui.error(f"Indexing aborted: {e}")
        raise typer.Exit(code=1)

    if output is not None:
        write_report(report, output)

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
        return

    ui.report(report, show_changes=options.show_changes or options.incremental)
    if output is not None:
        ui.success(f"Report written to {output}")
