# docindex/sources/base.py
"""
Source adapter contract.

Adapters handle the "where" of indexing - enumerating the documents of one
backing store (filesystem, wiki, git host, web pages) and turning them into
Document objects.

Flow: SourceConfig → AdapterRegistry.create() → SourceAdapter.search() → Documents

Subclasses implement fetch_documents() and, optionally, _check_connection() for the
health check. search(), health_check(), get_metadata() and cleanup() come
with working defaults.
"""

from __future__ import annotations

import os
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docindex.core.document import Document


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Configuration
# =============================================================================


class AuthConfig(BaseModel):
    """Credentials for a source. Secrets are read from the environment."""

    model_config = ConfigDict(extra="forbid")

    token_env: Optional[str] = Field(default=None, description="Env var holding the token")
    scheme: str = Field(default="Bearer", description="Authorization scheme prefix")
    header: str = Field(default="Authorization", description="Header carrying the token")


class SourceConfig(BaseModel):
    """
    One configured documentation source.

    Example YAML:
        - name: handbook
          type: file
          path: ./docs
          categories: [runbooks]
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Unique source name")
    type: str = Field(..., description="Adapter type (file, web, wiki, git)")
    path: Optional[str] = Field(default=None, description="Local path (file sources)")
    base_url: Optional[str] = Field(default=None, description="Base URL (remote sources)")
    auth: Optional[AuthConfig] = None
    enabled: bool = True
    timeout_s: float = Field(default=30.0, gt=0)
    categories: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Adapter specific options")

    @field_validator("type")
    @classmethod
    def _lower_type(cls, v: str) -> str:
        return v.strip().lower()


class SearchOptions(BaseModel):
    """Options for SourceAdapter.search()."""

    include_all: bool = False
    limit: Optional[int] = Field(default=None, ge=1)
    categories: List[str] = Field(default_factory=list)


# =============================================================================
# Adapter results
# =============================================================================


class HealthCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    healthy: bool
    details: Dict[str, Any] = Field(default_factory=dict)
    response_time_ms: float = 0.0
    last_check: datetime = Field(default_factory=_utc_now)


class SourceMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_name: str
    source_type: str
    status: str
    document_count: int = 0
    last_updated: Optional[str] = None


# =============================================================================
# Adapter base class
# =============================================================================


class SourceAdapter(ABC):
    """
    Base class for source adapters.

    Class attributes:
        source_type: Type name used in SourceConfig.type and the registry
    """

    source_type: ClassVar[str] = ""

    def __init__(self, config: SourceConfig, **_: Any) -> None:
        self.config = config
        self._initialized = False
        self._document_count = 0
        self._last_fetch: Optional[datetime] = None
        self._last_error: Optional[str] = None

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def initialized(self) -> bool:
        return self._initialized

    def resolve_token(self) -> Optional[str]:
        """Read the auth token from the environment variable named in the config."""
        auth = self.config.auth
        if auth is None or not auth.token_env:
            return None
        return os.environ.get(auth.token_env)

    async def initialize(self) -> None:
        """Prepare the adapter. Raises if the source cannot be configured."""
        self._initialized = True

    @abstractmethod
    async def fetch_documents(self) -> List[Document]:
        """Return the full current document set of the source."""
        ...

    async def _check_connection(self) -> Dict[str, Any]:
        """Check reachability; raise on failure. Returns health details."""
        return {}

    async def search(self, query: str, options: Optional[SearchOptions] = None) -> List[Document]:
        """
        Search the source.

        "*" (or include_all) enumerates every document in adapter order;
        anything else is a case-insensitive substring match on title and
        content.
        """
        options = options or SearchOptions()
        documents = await self.fetch_documents()

        self._document_count = len(documents)
        self._last_fetch = _utc_now()

        if not (options.include_all or query.strip() in ("", "*")):
            needle = query.lower()
            documents = [
                d for d in documents
                if needle in d.title.lower() or needle in d.content.lower()
            ]

        if options.categories:
            wanted = set(options.categories)
            documents = [
                d for d in documents
                if wanted.intersection(d.metadata.get("categories") or self.config.categories)
            ]

        if options.limit is not None:
            documents = documents[: options.limit]

        return documents

    async def health_check(self) -> HealthCheck:
        """Run _check_connection() and time it. Failures come back as healthy=False."""
        started = time.perf_counter()
        try:
            details = await self._check_connection()
            healthy = True
            self._last_error = None
        except Exception as e:
            details = {"error": f"{type(e).__name__}: {e}"}
            healthy = False
            self._last_error = str(e)

        return HealthCheck(
            healthy=healthy,
            details=details,
            response_time_ms=(time.perf_counter() - started) * 1000.0,
        )

    async def get_metadata(self) -> SourceMetadata:
        if self._last_error:
            status = "error"
        elif self._initialized:
            status = "ready"
        else:
            status = "uninitialized"

        return SourceMetadata(
            source_name=self.name,
            source_type=self.source_type,
            status=status,
            document_count=self._document_count,
            last_updated=self._last_fetch.isoformat() if self._last_fetch else None,
        )

    async def cleanup(self) -> None:
        """Release resources. Best effort."""
        self._initialized = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


__all__ = [
    "AuthConfig",
    "HealthCheck",
    "SearchOptions",
    "SourceAdapter",
    "SourceConfig",
    "SourceMetadata",
]
