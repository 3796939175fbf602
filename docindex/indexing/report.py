# docindex/indexing/report.py
"""
Report models for indexing runs.

A run produces exactly one IndexingReport, built from one SourceReport per
indexed source. Reports are immutable once built and serialize to JSON via
model_dump_json().

Also hosts the two heuristics that summarize a run:
- calculate_quality_score(): 0-10 completeness score of a document set
- generate_recommendations(): threshold based follow-up suggestions
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from docindex.core.document import Document, DocumentType
from docindex.indexing.diff import ChangeSet
from docindex.indexing.state.schema import utc_now
from docindex.sources.base import SourceMetadata

# Quality heuristic weights
TITLE_MIN_LENGTH = 5
CONTENT_MIN_LENGTH = 100
CONFIDENCE_THRESHOLD = 0.7
MAX_QUALITY_SCORE = 10.0

# Recommendation thresholds
SLOW_DOCUMENT_MS = 200.0
LOW_QUALITY_SCORE = 6.0


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SourceStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


# =============================================================================
# Error entries
# =============================================================================


class SourceError(BaseModel):
    """Error recorded against one source."""

    model_config = ConfigDict(frozen=True)

    operation: str
    message: str
    timestamp: datetime = Field(default_factory=utc_now)
    recoverable: bool = True


class IndexingError(BaseModel):
    """Run-level error entry."""

    model_config = ConfigDict(frozen=True)

    source: str
    error_type: str
    message: str
    timestamp: datetime = Field(default_factory=utc_now)
    severity: Severity = Severity.MEDIUM


# =============================================================================
# Reports
# =============================================================================


class ProgressReport(BaseModel):
    """Snapshot of the progress tracker's counters."""

    model_config = ConfigDict(frozen=True)

    total_sources: int = 0
    processed_sources: int = 0
    total_documents: int = 0
    processed_documents: int = 0
    success_rate: float = 0.0
    duration_ms: float = 0.0
    documents_per_second: float = 0.0
    errors_count: int = 0
    estimated_completion: float = Field(default=0.0, description="Estimated ms remaining")


class SourceReport(BaseModel):
    """Outcome of indexing one source."""

    model_config = ConfigDict(frozen=True)

    source_name: str
    source_type: str
    status: SourceStatus
    documents_processed: int = 0
    documents_skipped: int = 0
    processing_time_ms: float = 0.0
    avg_processing_time_per_doc: float = 0.0
    quality_score: float = Field(default=0.0, ge=0.0, le=MAX_QUALITY_SCORE)
    errors: List[SourceError] = Field(default_factory=list)
    metadata: SourceMetadata
    changes: Optional[ChangeSet] = None


class RunSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_sources: int = 0
    processed_sources: int = 0
    total_documents: int = 0
    processed_documents: int = 0
    success_rate: float = 0.0
    total_duration_ms: float = 0.0
    avg_documents_per_second: float = 0.0


class IndexingReport(BaseModel):
    """Run-level report, the only output artifact of a run."""

    model_config = ConfigDict(frozen=True)

    summary: RunSummary
    sources: List[SourceReport] = Field(default_factory=list)
    progress: ProgressReport = Field(default_factory=ProgressReport)
    errors: List[IndexingError] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    dry_run: bool = False
    incremental: bool = False
    since: Optional[str] = None
    generated_at: datetime = Field(default_factory=utc_now)

    @property
    def failed_sources(self) -> List[str]:
        return [s.source_name for s in self.sources if s.status == SourceStatus.FAILED]


# =============================================================================
# Heuristics
# =============================================================================


def document_quality(document: Document) -> float:
    """Completeness score of a single document, capped at 10."""
    score = 0.0

    if document.title and len(document.title) > TITLE_MIN_LENGTH:
        score += 2
    if document.content and len(document.content) > CONTENT_MIN_LENGTH:
        score += 3
    if document.last_updated:
        score += 1
    if document.type == DocumentType.RUNBOOK.value and getattr(document, "procedures", None):
        score += 2
    if document.confidence_score is not None and document.confidence_score > CONFIDENCE_THRESHOLD:
        score += 2

    return min(score, MAX_QUALITY_SCORE)


def calculate_quality_score(documents: Sequence[Document]) -> float:
    """
    Average document quality on a 0-10 scale.

    Returns 0 for an empty document set.
    """
    if not documents:
        return 0.0

    total = sum(document_quality(doc) for doc in documents)
    return min(total / len(documents), MAX_QUALITY_SCORE)


def build_summary(
    source_reports: Sequence[SourceReport],
    total_sources: int,
    duration_ms: float,
) -> RunSummary:
    """
    Aggregate per-source reports.

    total_documents counts every processed document; processed_documents
    only those of sources that finished with status success.
    """
    total_documents = sum(r.documents_processed for r in source_reports)
    successful = sum(
        r.documents_processed for r in source_reports if r.status == SourceStatus.SUCCESS
    )

    return RunSummary(
        total_sources=total_sources,
        processed_sources=len(source_reports),
        total_documents=total_documents,
        processed_documents=successful,
        success_rate=successful / total_documents if total_documents > 0 else 0.0,
        total_duration_ms=duration_ms,
        avg_documents_per_second=successful / (duration_ms / 1000) if duration_ms > 0 else 0.0,
    )


def generate_recommendations(
    source_reports: Sequence[SourceReport],
    errors: Sequence[IndexingError],
    parallel: bool = False,
) -> List[str]:
    """Threshold based follow-up suggestions for a finished run."""
    recommendations: List[str] = []

    if source_reports:
        avg_time = sum(r.avg_processing_time_per_doc for r in source_reports) / len(source_reports)
        if avg_time > SLOW_DOCUMENT_MS and not parallel:
            recommendations.append(
                "Consider enabling parallel processing to improve performance"
            )

        avg_quality = sum(r.quality_score for r in source_reports) / len(source_reports)
        if avg_quality < LOW_QUALITY_SCORE:
            recommendations.append(
                "Review documentation quality - many documents are missing essential metadata"
            )

    critical = sum(1 for e in errors if e.severity == Severity.CRITICAL)
    if critical:
        recommendations.append(f"Address {critical} critical error(s) before production deployment")

    failed = [r.source_name for r in source_reports if r.status == SourceStatus.FAILED]
    if failed:
        recommendations.append(
            f"Check connectivity and credentials for failed sources: {', '.join(failed)}"
        )

    return recommendations


__all__ = [
    "IndexingError",
    "IndexingReport",
    "ProgressReport",
    "RunSummary",
    "Severity",
    "SourceError",
    "SourceReport",
    "SourceStatus",
    "build_summary",
    "calculate_quality_score",
    "document_quality",
    "generate_recommendations",
]
