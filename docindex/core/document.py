# docindex/core/document.py
"""
Document model shared by source adapters, change detection and reporting.

A Document is a tagged union over the known documentation classifications.
Every variant carries the same base shape (id, title, content, last_updated,
type) plus provenance fields; the classification-specific fields only exist
on the variants that use them:

- runbook:          procedures, decision_tree
- procedure:        procedures
- escalation_guide: decision_tree
- troubleshooting:  decision_tree
- documentation:    (base only)

Adapters hand raw mappings to parse_document(), which maps unknown or
missing types to "documentation" instead of failing.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class DocumentType(str, Enum):
    """Known documentation classifications."""

    RUNBOOK = "runbook"
    PROCEDURE = "procedure"
    ESCALATION_GUIDE = "escalation_guide"
    TROUBLESHOOTING = "troubleshooting"
    DOCUMENTATION = "documentation"


DOCUMENT_TYPES = frozenset(t.value for t in DocumentType)


class _DocumentBase(BaseModel):
    """Fields shared by every document variant."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Stable identifier, unique within a source")
    title: str = Field(default="", description="Human readable title")
    content: str = Field(default="", description="Raw document content")
    last_updated: Optional[str] = Field(
        default=None, description="Last update as reported by the source (ISO-8601)"
    )
    source: str = Field(default="", description="Name of the configured source")
    source_type: str = Field(default="", description="Adapter type (file, web, wiki, git)")
    url: Optional[str] = Field(default=None, description="Canonical location, if any")
    confidence_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("last_updated", mode="before")
    @classmethod
    def _normalize_last_updated(cls, v: Any) -> Any:
        if isinstance(v, (datetime, date)):
            return v.isoformat()
        return v

    @field_validator("content", "title", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class RunbookDocument(_DocumentBase):
    type: Literal["runbook"] = "runbook"
    procedures: Optional[List[Any]] = None
    decision_tree: Optional[Any] = None


class ProcedureDocument(_DocumentBase):
    type: Literal["procedure"] = "procedure"
    procedures: Optional[List[Any]] = None


class EscalationGuideDocument(_DocumentBase):
    type: Literal["escalation_guide"] = "escalation_guide"
    decision_tree: Optional[Any] = None


class TroubleshootingDocument(_DocumentBase):
    type: Literal["troubleshooting"] = "troubleshooting"
    decision_tree: Optional[Any] = None


class DocumentationDocument(_DocumentBase):
    type: Literal["documentation"] = "documentation"


Document = Annotated[
    Union[
        RunbookDocument,
        ProcedureDocument,
        EscalationGuideDocument,
        TroubleshootingDocument,
        DocumentationDocument,
    ],
    Field(discriminator="type"),
]

_DOCUMENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(Document)


def normalize_document_type(value: Any) -> str:
    """Map a raw type value to a known classification, defaulting to documentation."""
    if isinstance(value, DocumentType):
        return value.value
    if isinstance(value, str):
        lowered = value.strip().lower().replace("-", "_").replace(" ", "_")
        if lowered in DOCUMENT_TYPES:
            return lowered
    return DocumentType.DOCUMENTATION.value


def parse_document(data: Mapping[str, Any]) -> Document:
    """
    Build a Document variant from a raw mapping.

    Unknown or missing "type" values become "documentation". Fields that
    the chosen variant does not define are ignored.

    Raises:
        pydantic.ValidationError: If required fields are missing or invalid
    """
    payload = dict(data)
    payload["type"] = normalize_document_type(payload.get("type"))
    return _DOCUMENT_ADAPTER.validate_python(payload)


__all__ = [
    "Document",
    "DocumentType",
    "DOCUMENT_TYPES",
    "RunbookDocument",
    "ProcedureDocument",
    "EscalationGuideDocument",
    "TroubleshootingDocument",
    "DocumentationDocument",
    "normalize_document_type",
    "parse_document",
]
