# docindex/cli/ui.py
"""
Shared UI helpers for CLI commands.

Usage:
    from docindex.cli.ui import ui

    ui.header("docindex index", "3 sources")
    ui.success("Done!")
    ui.report(report)
"""

from __future__ import annotations

from typing import Iterable, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from docindex.indexing.report import IndexingReport, Severity, SourceStatus

console = Console()

_STATUS_STYLE = {
    SourceStatus.SUCCESS: "green",
    SourceStatus.PARTIAL: "yellow",
    SourceStatus.FAILED: "red",
}

_SEVERITY_STYLE = {
    Severity.LOW: "dim",
    Severity.MEDIUM: "yellow",
    Severity.HIGH: "red",
    Severity.CRITICAL: "bold red",
}


class UI:
    """Console output helpers with consistent styling."""

    # -------------------------------------------------------------------------
    # Output Methods
    # -------------------------------------------------------------------------

    def print(self, msg: str, style: str = "") -> None:
        if style:
            console.print(f"[{style}]{msg}[/{style}]")
        else:
            console.print(msg)

    def header(self, title: str, subtitle: str = "") -> None:
        """Print a fitted command header."""
        if subtitle:
            content = f"[bold]{title}[/bold]\n[dim]{subtitle}[/dim]"
        else:
            content = f"[bold]{title}[/bold]"
        console.print(Panel.fit(content, border_style="blue"))

    def section(self, title: str) -> None:
        console.print(f"\n[bold cyan]{title}[/bold cyan]")

    def success(self, msg: str) -> None:
        console.print(f"[green]✓[/green] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[red]✗ {msg}[/red]")

    def warning(self, msg: str, detail: str = "") -> None:
        detail_str = f" [dim]({detail})[/dim]" if detail else ""
        console.print(f"[yellow]⚠[/yellow] {msg}{detail_str}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{msg}[/dim]")

    def table(self, title: str, columns: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
        table = Table(title=title, title_justify="left")
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        console.print(table)

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def report(self, report: IndexingReport, show_changes: bool = False) -> None:
        """Render an IndexingReport: sources, changes, errors, recommendations."""
        summary = report.summary

        table = Table(title="Sources", title_justify="left")
        table.add_column("Source")
        table.add_column("Type")
        table.add_column("Status")
        table.add_column("Processed", justify="right")
        table.add_column("Skipped", justify="right")
        table.add_column("Quality", justify="right")
        table.add_column("Errors", justify="right")

        for source in report.sources:
            style = _STATUS_STYLE[source.status]
            table.add_row(
                source.source_name,
                source.source_type,
                f"[{style}]{source.status.value}[/{style}]",
                str(source.documents_processed),
                str(source.documents_skipped),
                f"{source.quality_score:.1f}",
                str(len(source.errors)),
            )
        console.print(table)

        if show_changes:
            self._changes(report)

        if report.errors:
            self.section("Errors")
            for error in report.errors:
                style = _SEVERITY_STYLE[error.severity]
                console.print(
                    f"  [{style}]{error.severity.value}[/{style}] "
                    f"{error.source}: {error.error_type} - {error.message}"
                )

        if report.recommendations:
            self.section("Recommendations")
            for recommendation in report.recommendations:
                console.print(f"  • {recommendation}")

        mode = "dry run" if report.dry_run else ("incremental" if report.incremental else "full")
        console.print(
            f"\n[bold]{summary.processed_documents}/{summary.total_documents}[/bold] documents, "
            f"[bold]{summary.processed_sources}/{summary.total_sources}[/bold] sources, "
            f"{summary.total_duration_ms / 1000:.2f}s ({mode})"
        )

    def _changes(self, report: IndexingReport) -> None:
        rows = []
        for source in report.sources:
            if source.changes is None:
                continue
            stats = source.changes.statistics
            rows.append(
                (
                    source.source_name,
                    f"[green]+{stats.additions_count}[/green]",
                    f"[yellow]~{stats.updates_count}[/yellow]",
                    f"[red]-{stats.deletions_count}[/red]",
                    str(len(source.changes.unchanged)),
                )
            )
        if rows:
            self.table("Changes", ["Source", "Added", "Updated", "Deleted", "Unchanged"], rows)


ui = UI()

__all__ = ["UI", "console", "ui"]
