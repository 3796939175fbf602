# docindex/indexing/indexer.py
"""
Documentation indexer - the run orchestrator.

Flow per run:
    initialize()          build + initialize one adapter per configured source
    index_all_sources()   index every adapter (concurrently or one by one)
        index_source()    health check → fetch → (detect changes) → process
    cleanup()             release adapters

Per source the state machine is
    initializing → fetching → (detecting changes) → processing → success | partial | failed
and reaches exactly one terminal state.

Failure isolation:
- a failing document is a recoverable SourceError; the batch continues
- a failing health check or fetch marks only that source failed
- an exception escaping one source's task becomes a run-level error; other
  sources are unaffected
- FatalIndexingError (snapshot store, adapter init outside dry run) aborts
  the run once every running task has settled

Usage:
    settings = load_settings("docindex.yaml")
    options = build_run_options(settings, incremental=True, parallel=True)

    async with DocumentationIndexer(settings, options) as indexer:
        report = await indexer.index_all_sources()
"""

from __future__ import annotations

import asyncio
import time
from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from docindex.core.document import Document
from docindex.indexing.config import IndexerSettings, RunOptions
from docindex.indexing.diff import ChangeDetectionService, ChangeSet
from docindex.indexing.errors import (
    AdapterInitializationError,
    FatalIndexingError,
    SourceUnavailableError,
)
from docindex.indexing.progress import ProgressTracker
from docindex.indexing.report import (
    IndexingError,
    IndexingReport,
    Severity,
    SourceError,
    SourceReport,
    SourceStatus,
    build_summary,
    calculate_quality_score,
    generate_recommendations,
)
from docindex.indexing.state.schema import utc_now
from docindex.logging.logger import get_logger
from docindex.logging.tags import INDEXER
from docindex.sources.base import SearchOptions, SourceAdapter, SourceMetadata
from docindex.sources.registry import AdapterNotFoundError, AdapterRegistry, default_registry

logger = get_logger(__name__)

# How many titles show_changes lists per category in verbose mode
CHANGE_PREVIEW_LIMIT = 5


# =============================================================================
# Document processing
# =============================================================================


@runtime_checkable
class DocumentProcessor(Protocol):
    """Does the per-document work of a run. Raise to mark a document failed."""

    async def process(self, document: Document) -> None:
        ...


class LoggingDocumentProcessor:
    """Default processor: logs the document and yields to the event loop."""

    async def process(self, document: Document) -> None:
        logger.debug(f"{INDEXER} Processing document {document.id!r} ({document.title})")
        await asyncio.sleep(0)


# =============================================================================
# Indexer
# =============================================================================


class DocumentationIndexer:
    """
    Orchestrates one indexing run over the configured sources.

    Args:
        settings: Sources and state directory
        options: Run options (defaults to settings.defaults)
        registry: Adapter registry (defaults to the built-in adapters)
        change_detection: Change detection service (defaults to one on
            settings.resolved_state_dir())
        progress: Progress tracker for this run
        processor: Per-document processor
    """

    def __init__(
        self,
        settings: IndexerSettings,
        options: Optional[RunOptions] = None,
        *,
        registry: Optional[AdapterRegistry] = None,
        change_detection: Optional[ChangeDetectionService] = None,
        progress: Optional[ProgressTracker] = None,
        processor: Optional[DocumentProcessor] = None,
    ) -> None:
        self.settings = settings
        self.options = options if options is not None else settings.defaults
        self.registry = registry if registry is not None else default_registry()
        self.change_detection = (
            change_detection
            if change_detection is not None
            else ChangeDetectionService(settings.resolved_state_dir())
        )
        self.progress = progress if progress is not None else ProgressTracker(verbose=self.options.verbose)
        self.processor = processor if processor is not None else LoggingDocumentProcessor()

        self._adapters: Dict[str, SourceAdapter] = {}
        self._init_errors: List[IndexingError] = []

    @property
    def adapters(self) -> Dict[str, SourceAdapter]:
        return dict(self._adapters)

    async def __aenter__(self) -> "DocumentationIndexer":
        try:
            await self.initialize()
        except BaseException:
            await self.cleanup()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.cleanup()

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Build and initialize an adapter for every selected source.

        Raises:
            AdapterInitializationError: If an adapter fails to initialize
                and the run is not a dry run. Adapters initialized before
                it are cleaned up first.
        """
        wanted = set(self.options.sources)
        logger.info(
            f"{INDEXER} Initializing indexer "
            f"(parallel={self.options.parallel}, incremental={self.options.incremental}, "
            f"dry_run={self.options.dry_run})"
        )

        for source_config in self.settings.sources:
            if wanted and source_config.name not in wanted:
                continue
            if not source_config.enabled:
                logger.info(f"{INDEXER} Source {source_config.name!r} is disabled, skipping")
                continue

            try:
                adapter = self.registry.create(source_config)
            except AdapterNotFoundError as e:
                logger.warning(f"{INDEXER} Skipping source {source_config.name!r}: {e}")
                continue

            try:
                await adapter.initialize()
            except Exception as e:
                logger.error(
                    f"{INDEXER} Failed to initialize {source_config.name!r} "
                    f"({source_config.type}): {type(e).__name__}: {e}"
                )
                await self._cleanup_adapter(source_config.name, adapter)

                if not self.options.dry_run:
                    await self.cleanup()
                    raise AdapterInitializationError(source_config.name, str(e)) from e

                self._init_errors.append(
                    IndexingError(
                        source=source_config.name,
                        error_type="initialization_failure",
                        message=str(e),
                        severity=Severity.CRITICAL,
                    )
                )
                continue

            self._adapters[source_config.name] = adapter
            logger.info(f"{INDEXER} Initialized source {source_config.name!r} ({source_config.type})")

        unknown = wanted - {s.name for s in self.settings.sources}
        if unknown:
            logger.warning(f"{INDEXER} Unknown source name(s) in filter: {sorted(unknown)}")

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def index_all_sources(self) -> IndexingReport:
        """
        Index every initialized source and aggregate the results.

        Raises:
            FatalIndexingError: After all running sources settled, if any of
                them hit a fatal error
        """
        started = time.perf_counter()
        names = list(self._adapters)

        if self.options.since:
            logger.info(f"{INDEXER} Indexing changes since {self.options.since} (informational)")
        logger.info(f"{INDEXER} Indexing {len(names)} source(s): {names}")

        self.progress.start_indexing(names)

        errors: List[IndexingError] = []
        for error in self._init_errors:
            self._record_error(errors, error)

        reports: List[SourceReport] = []
        fatal: Optional[FatalIndexingError] = None

        try:
            if self.options.parallel:
                results = await asyncio.gather(
                    *(self.index_source(name, self._adapters[name]) for name in names),
                    return_exceptions=True,
                )
                outcomes = list(zip(names, results))
            else:
                outcomes = []
                for name in names:
                    try:
                        outcomes.append((name, await self.index_source(name, self._adapters[name])))
                    except Exception as e:
                        outcomes.append((name, e))
                        if isinstance(e, FatalIndexingError):
                            break

            for name, result in outcomes:
                if isinstance(result, BaseException):
                    if not isinstance(result, Exception):
                        raise result
                    logger.error(f"{INDEXER} Indexing {name!r} failed: {type(result).__name__}: {result}")
                    self._record_error(
                        errors,
                        IndexingError(
                            source=name,
                            error_type="indexing_failure",
                            message=str(result),
                            severity=Severity.HIGH,
                        ),
                    )
                    if isinstance(result, FatalIndexingError) and fatal is None:
                        fatal = result
                    continue

                reports.append(result)
                if result.status == SourceStatus.FAILED:
                    message = result.errors[0].message if result.errors else "source failed"
                    self._record_error(
                        errors,
                        IndexingError(
                            source=name,
                            error_type="source_failure",
                            message=message,
                            severity=Severity.HIGH,
                        ),
                    )
        finally:
            progress_report = self.progress.finish()

        if fatal is not None:
            raise fatal

        duration_ms = (time.perf_counter() - started) * 1000.0
        report = IndexingReport(
            summary=build_summary(reports, total_sources=len(names), duration_ms=duration_ms),
            sources=reports,
            progress=progress_report,
            errors=errors,
            recommendations=generate_recommendations(reports, errors, parallel=self.options.parallel),
            dry_run=self.options.dry_run,
            incremental=self.options.incremental,
            since=self.options.since,
        )

        logger.info(
            f"{INDEXER} Indexing complete: {report.summary.processed_documents}/"
            f"{report.summary.total_documents} documents from "
            f"{report.summary.processed_sources}/{report.summary.total_sources} sources, "
            f"{len(errors)} error(s)"
        )
        return report

    def _record_error(self, errors: List[IndexingError], error: IndexingError) -> None:
        errors.append(error)
        self.progress.report_error(error)

    async def index_source(self, name: str, adapter: SourceAdapter) -> SourceReport:
        """
        Index one source and return its report.

        Health check and fetch failures produce a failed report. Processing
        and metadata failures make it partial. Fatal errors (snapshot store)
        propagate.
        """
        started = time.perf_counter()
        logger.info(f"{INDEXER} Indexing source {name!r}")
        self.progress.update_progress(name, 0, 0, "initializing")

        try:
            health = await adapter.health_check()
            if not health.healthy:
                raise SourceUnavailableError(f"Source {name} is not healthy: {health.details}")

            self.progress.update_progress(name, 0, 0, "fetching")
            documents = await adapter.search("*", SearchOptions(include_all=True))
        except FatalIndexingError:
            raise
        except Exception as e:
            logger.error(f"{INDEXER} Source {name!r} failed: {type(e).__name__}: {e}")
            return self._failed_report(name, adapter, started, e)

        self.progress.update_progress(name, 0, len(documents), "processing")

        errors: List[SourceError] = []
        changes: Optional[ChangeSet] = None
        skipped = 0

        if self.options.incremental:
            self.progress.update_progress(name, 0, len(documents), "detecting changes")
            # dry runs leave the snapshot untouched so the next real run still sees these changes
            changes = await self.change_detection.detect_changes(
                name, documents, persist=not self.options.dry_run
            )
            skipped = len(changes.unchanged)

            if self.options.show_changes:
                self._log_changes(name, changes)

            if self.options.dry_run:
                processed = changes.statistics.total_changes
                self.progress.update_progress(name, processed, processed, "processing")
            else:
                changed = set(changes.changed_ids)
                to_process = [doc for doc in documents if doc.id in changed]
                processed = await self._process_documents(name, to_process, errors)
        elif self.options.dry_run:
            processed = len(documents)
            self.progress.update_progress(name, processed, processed, "processing")
        else:
            processed = await self._process_documents(name, documents, errors)

        self.progress.complete_source(name)

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        try:
            metadata = await adapter.get_metadata()
        except FatalIndexingError:
            raise
        except Exception as e:
            logger.warning(f"{INDEXER} Failed to read metadata for {name!r}: {type(e).__name__}: {e}")
            errors.append(
                SourceError(
                    operation="get_metadata",
                    message=f"Failed to read source metadata: {e}",
                    recoverable=True,
                )
            )
            metadata = SourceMetadata(
                source_name=name,
                source_type=adapter.source_type,
                status="error",
                document_count=len(documents),
                last_updated=utc_now().isoformat(),
            )
        status = SourceStatus.PARTIAL if errors else SourceStatus.SUCCESS

        logger.info(
            f"{INDEXER} Source {name!r} {status.value}: {processed} processed, "
            f"{skipped} unchanged, {len(errors)} error(s) in {elapsed_ms:.0f}ms"
        )

        return SourceReport(
            source_name=name,
            source_type=adapter.source_type,
            status=status,
            documents_processed=processed,
            documents_skipped=skipped,
            processing_time_ms=elapsed_ms,
            avg_processing_time_per_doc=elapsed_ms / processed if processed > 0 else 0.0,
            quality_score=calculate_quality_score(documents),
            errors=errors,
            metadata=metadata,
            changes=changes,
        )

    async def _process_documents(
        self,
        name: str,
        documents: Sequence[Document],
        errors: List[SourceError],
    ) -> int:
        """Process documents in order, batch by batch. Returns the success count."""
        processed = 0
        total = len(documents)
        batch_size = self.options.batch_size

        for offset in range(0, total, batch_size):
            batch = documents[offset : offset + batch_size]

            for document in batch:
                try:
                    await self.processor.process(document)
                except FatalIndexingError:
                    raise
                except Exception as e:
                    logger.warning(f"{INDEXER} Failed to process {document.id!r} in {name!r}: {e}")
                    errors.append(
                        SourceError(
                            operation="process_document",
                            message=f"Failed to process document {document.id}: {e}",
                            recoverable=True,
                        )
                    )
                else:
                    processed += 1

                self.progress.update_progress(name, processed, total, "processing")

            logger.debug(
                f"{INDEXER} {name}: batch {offset // batch_size + 1} done "
                f"({min(offset + batch_size, total)}/{total})"
            )

        return processed

    def _failed_report(
        self,
        name: str,
        adapter: SourceAdapter,
        started: float,
        error: Exception,
    ) -> SourceReport:
        return SourceReport(
            source_name=name,
            source_type=adapter.source_type,
            status=SourceStatus.FAILED,
            processing_time_ms=(time.perf_counter() - started) * 1000.0,
            errors=[
                SourceError(operation="index_source", message=str(error), recoverable=False)
            ],
            metadata=SourceMetadata(
                source_name=name,
                source_type=adapter.source_type,
                status="failed",
                document_count=0,
                last_updated=utc_now().isoformat(),
            ),
        )

    def _log_changes(self, name: str, changes: ChangeSet) -> None:
        stats = changes.statistics
        logger.info(
            f"{INDEXER} Changes for {name}: +{stats.additions_count} added, "
            f"~{stats.updates_count} updated, -{stats.deletions_count} deleted"
        )

        if not self.options.verbose:
            return

        for addition in changes.additions[:CHANGE_PREVIEW_LIMIT]:
            logger.info(f"{INDEXER}   + {addition.title} ({addition.classification.value})")
        if len(changes.additions) > CHANGE_PREVIEW_LIMIT:
            logger.info(f"{INDEXER}   ... and {len(changes.additions) - CHANGE_PREVIEW_LIMIT} more")

        for update in changes.updates[:CHANGE_PREVIEW_LIMIT]:
            logger.info(f"{INDEXER}   ~ {update.title} ({update.change_type.value} changes)")
        if len(changes.updates) > CHANGE_PREVIEW_LIMIT:
            logger.info(f"{INDEXER}   ... and {len(changes.updates) - CHANGE_PREVIEW_LIMIT} more")

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    async def _cleanup_adapter(self, name: str, adapter: SourceAdapter) -> None:
        try:
            await adapter.cleanup()
        except Exception as e:
            logger.warning(f"{INDEXER} Cleanup of {name!r} failed: {type(e).__name__}: {e}")

    async def cleanup(self) -> None:
        """Clean up every adapter; individual failures are logged, not raised."""
        for name, adapter in list(self._adapters.items()):
            await self._cleanup_adapter(name, adapter)
        self._adapters.clear()
        logger.debug(f"{INDEXER} Cleanup complete")


__all__ = [
    "CHANGE_PREVIEW_LIMIT",
    "DocumentProcessor",
    "DocumentationIndexer",
    "LoggingDocumentProcessor",
]
