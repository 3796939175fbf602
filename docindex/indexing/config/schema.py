# docindex/indexing/config/schema.py
"""
Configuration schemas for indexing runs.

This module defines Pydantic models for:
- RunOptions: Per-run options (CLI flags, settings defaults)
- IndexerSettings: The settings file (state dir, sources, defaults)

Example YAML:
    state_dir: .docindex/state/indexing

    defaults:
      incremental: true
      batch_size: 50

    sources:
      - name: handbook
        type: file
        path: ./docs
      - name: ops-wiki
        type: wiki
        base_url: https://wiki.example.com
        auth: {token_env: WIKI_TOKEN}
        metadata: {space_key: OPS}
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docindex.core.paths import DocIndexPaths
from docindex.sources.base import SourceConfig

DEFAULT_BATCH_SIZE = 25


class RunOptions(BaseModel):
    """
    Options for one indexing run.

    Unknown keys are ignored so callers can pass a whole options mapping.
    """

    model_config = ConfigDict(extra="ignore")

    sources: List[str] = Field(default_factory=list, description="Only index these sources")
    parallel: bool = Field(default=False, description="Index sources concurrently")
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    dry_run: bool = Field(default=False, description="Detect and count, never process or persist")
    incremental: bool = Field(default=False, description="Only process changed documents")
    since: Optional[str] = Field(default=None, description="ISO date (YYYY-MM-DD), informational only")
    show_changes: bool = Field(default=False, description="Log change detection results")
    verbose: bool = False

    @field_validator("since", mode="before")
    @classmethod
    def _since_to_str(cls, v: Any) -> Any:
        if isinstance(v, date):
            return v.isoformat()
        if isinstance(v, str):
            return date.fromisoformat(v.strip()).isoformat()
        return v

    @field_validator("sources", mode="before")
    @classmethod
    def _split_sources(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v


class IndexerSettings(BaseModel):
    """Central configuration for the indexer."""

    model_config = ConfigDict(extra="forbid")

    state_dir: Optional[Path] = Field(
        default=None, description="Snapshot directory (default: .docindex/state/indexing)"
    )
    sources: List[SourceConfig] = Field(default_factory=list)
    defaults: RunOptions = Field(default_factory=RunOptions)

    @field_validator("sources")
    @classmethod
    def _unique_names(cls, v: List[SourceConfig]) -> List[SourceConfig]:
        seen = set()
        for source in v:
            if source.name in seen:
                raise ValueError(f"duplicate source name: {source.name!r}")
            seen.add(source.name)
        return v

    def resolved_state_dir(self) -> Path:
        return self.state_dir if self.state_dir is not None else DocIndexPaths.state_dir()

    def get_source(self, name: str) -> Optional[SourceConfig]:
        for source in self.sources:
            if source.name == name:
                return source
        return None


__all__ = [
    "DEFAULT_BATCH_SIZE",
    "IndexerSettings",
    "RunOptions",
]
