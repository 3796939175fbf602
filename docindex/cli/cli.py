# docindex/cli/cli.py
"""
docindex CLI - Main application.

Commands:
    docindex index          Index documentation sources
    docindex sources        List configured sources (and check health)
    docindex state show     Show fingerprint snapshots
    docindex state clear    Delete fingerprint snapshots

NOTE: Commands use lazy loading - imports only happen when a command is invoked.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from docindex import __version__

app = typer.Typer(
    name="docindex",
    help="docindex - incremental documentation indexer.",
    no_args_is_help=True,
    add_completion=False,
)

state_app = typer.Typer(
    help="Inspect or reset fingerprint snapshots.",
    no_args_is_help=True,
)
app.add_typer(state_app, name="state")

CONFIG_HELP = "Settings file (default: .docindex/config.yaml)."


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"docindex {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """docindex - incremental documentation indexer."""


# =============================================================================
# LAZY COMMANDS
# =============================================================================


@app.command("index")
def index(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    sources: Optional[List[str]] = typer.Option(None, "--source", "-s", help="Only index this source (repeatable)."),
    parallel: Optional[bool] = typer.Option(None, "--parallel/--sequential", help="Index sources concurrently."),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", "-b", min=1, help="Documents per batch."),
    dry_run: Optional[bool] = typer.Option(None, "--dry-run", help="Detect changes without processing or saving."),
    incremental: Optional[bool] = typer.Option(None, "--incremental/--full", "-i", help="Only process changed documents."),
    since: Optional[str] = typer.Option(None, "--since", help="Informational start date."),
    show_changes: Optional[bool] = typer.Option(None, "--show-changes", help="Show change detection results."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and detailed progress."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON report here."),
    as_json: bool = typer.Option(False, "--json", help="Print the JSON report instead of tables."),
) -> None:
    """Index documentation sources."""
    from docindex.cli.commands import index as mod

    mod.command(
        config=config,
        sources=sources,
        parallel=parallel,
        batch_size=batch_size,
        dry_run=dry_run,
        incremental=incremental,
        since=since,
        show_changes=show_changes,
        verbose=verbose,
        output=output,
        as_json=as_json,
    )


@app.command("sources")
def sources_cmd(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    check: bool = typer.Option(False, "--check", help="Run each source's health check."),
) -> None:
    """List configured sources and available adapter types."""
    from docindex.cli.commands import sources as mod

    mod.command(config=config, check=check)


@state_app.command("show")
def state_show(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    state_dir: Optional[Path] = typer.Option(None, "--state-dir", help="Snapshot directory override."),
) -> None:
    """Show fingerprint snapshots."""
    from docindex.cli.commands import state as mod

    mod.show(config=config, state_dir=state_dir)


@state_app.command("clear")
def state_clear(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    state_dir: Optional[Path] = typer.Option(None, "--state-dir", help="Snapshot directory override."),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Only clear this source."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation."),
) -> None:
    """Delete fingerprint snapshots (forces a full baseline next run)."""
    from docindex.cli.commands import state as mod

    mod.clear(config=config, state_dir=state_dir, source=source, yes=yes)


if __name__ == "__main__":
    app()
