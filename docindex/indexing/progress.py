# docindex/indexing/progress.py
"""
Progress tracking for indexing runs.

One ProgressTracker per run, created by the caller and handed to the
indexer. Each source writes only its own progress slot; run-wide totals are
recomputed as sums over the slots, so concurrent per-source tasks need no
locking.

Usage:
    tracker = ProgressTracker(verbose=True)
    tracker.start_indexing(["handbook", "wiki"])
    tracker.update_progress("handbook", 3, 10, phase="processing")
    tracker.complete_source("handbook")
    report = tracker.finish()
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from docindex.logging.logger import get_logger
from docindex.logging.tags import PROGRESS

from .report import IndexingError, ProgressReport, Severity

logger = get_logger(__name__)

PHASES = ("initializing", "fetching", "detecting changes", "processing")


@dataclass
class SourceProgress:
    """Progress slot of one source."""

    processed: int = 0
    total: int = 0
    phase: str = "processing"
    started_at: float = 0.0


class ProgressTracker:
    """
    Accumulates per-source progress and run-level errors.

    Args:
        verbose: Log every progress update at INFO instead of DEBUG
        clock: Monotonic clock in seconds (injectable for tests)
    """

    def __init__(self, verbose: bool = False, clock: Callable[[], float] = time.monotonic) -> None:
        self.verbose = verbose
        self._clock = clock
        self._start = clock()
        self._total_sources = 0
        self._processed_sources = 0
        self._total_documents = 0
        self._processed_documents = 0
        self._errors: List[IndexingError] = []
        self._sources: Dict[str, SourceProgress] = {}

    def _log(self, message: str) -> None:
        if self.verbose:
            logger.info(message)
        else:
            logger.debug(message)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_indexing(self, source_names: Sequence[str]) -> None:
        """Reset every counter for a new run."""
        self._start = self._clock()
        self._total_sources = len(source_names)
        self._processed_sources = 0
        self._total_documents = 0
        self._processed_documents = 0
        self._errors = []
        self._sources = {}

        logger.info(f"{PROGRESS} Starting indexing for {len(source_names)} source(s)")

    def update_progress(
        self,
        source: str,
        processed: int,
        total: int,
        phase: Optional[str] = None,
    ) -> None:
        """Set a source's processed/total counts and optionally its phase."""
        slot = self._sources.get(source)
        if slot is None:
            slot = self._sources[source] = SourceProgress(started_at=self._clock())

        slot.processed = processed
        slot.total = total
        if phase:
            slot.phase = phase

        self._total_documents = sum(s.total for s in self._sources.values())
        self._processed_documents = sum(s.processed for s in self._sources.values())

        self._log(
            f"{PROGRESS} {source}: {processed}/{total} documents ({slot.phase}) "
            f"- overall {self._processed_documents}/{self._total_documents} "
            f"({self.percentage}%)"
        )

    def report_error(self, error: IndexingError) -> None:
        """Record a run-level error. Never halts anything."""
        self._errors.append(error)

        if error.severity in (Severity.HIGH, Severity.CRITICAL):
            logger.warning(f"{PROGRESS} {error.source}: {error.message}")
        else:
            self._log(f"{PROGRESS} {error.source}: {error.message}")

    def complete_source(self, source: str) -> None:
        self._processed_sources += 1
        self._log(f"{PROGRESS} Completed source: {source}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def percentage(self) -> int:
        """Rounded overall completion percentage (0 when nothing is known)."""
        if self._total_documents <= 0:
            return 0
        return round(self._processed_documents / self._total_documents * 100)

    @property
    def errors(self) -> List[IndexingError]:
        return list(self._errors)

    def source_progress(self, source: str) -> Optional[SourceProgress]:
        return self._sources.get(source)

    def elapsed_ms(self) -> float:
        return max((self._clock() - self._start) * 1000.0, 0.0)

    def estimate_time_remaining(self, elapsed_ms: Optional[float] = None) -> float:
        """
        Estimated milliseconds until completion.

        remaining / (processed / elapsed); 0 when nothing was processed yet.
        """
        if self._processed_documents == 0:
            return 0.0

        elapsed = self.elapsed_ms() if elapsed_ms is None else elapsed_ms
        if elapsed <= 0:
            return 0.0

        rate = self._processed_documents / elapsed
        remaining = self._total_documents - self._processed_documents
        return max(remaining / rate, 0.0)

    def generate_progress_report(self) -> ProgressReport:
        duration = self.elapsed_ms()
        return ProgressReport(
            total_sources=self._total_sources,
            processed_sources=self._processed_sources,
            total_documents=self._total_documents,
            processed_documents=self._processed_documents,
            success_rate=(
                self._processed_documents / self._total_documents
                if self._total_documents > 0
                else 0.0
            ),
            duration_ms=duration,
            documents_per_second=(
                self._processed_documents / (duration / 1000) if duration > 0 else 0.0
            ),
            errors_count=len(self._errors),
            estimated_completion=self.estimate_time_remaining(duration),
        )

    def finish(self) -> ProgressReport:
        """Log the final summary and return it."""
        report = self.generate_progress_report()

        logger.info(
            f"{PROGRESS} Indexing finished: {report.processed_sources}/{report.total_sources} "
            f"sources, {report.processed_documents}/{report.total_documents} documents "
            f"in {report.duration_ms / 1000:.2f}s ({report.documents_per_second:.1f} docs/s)"
        )
        if report.errors_count:
            logger.warning(f"{PROGRESS} {report.errors_count} error(s) during indexing")

        return report


__all__ = [
    "PHASES",
    "ProgressTracker",
    "SourceProgress",
]
