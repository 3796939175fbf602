# tests/conftest.py
"""
Shared fixtures for docindex tests.

Test Tiers:
- tier1: pure logic, no I/O           Run: pytest -m tier1
- tier2: filesystem / mock transports Run: pytest -m "tier1 or tier2"

Fakes:
- FakeAdapter: in-memory SourceAdapter with switchable failures
- RecordingProcessor: records processed ids, fails on request
- FailingChangeDetection: change detection that raises for chosen sources
- FakeEnvironment (fake_env fixture): wires fakes into settings,
  a registry and a DocumentationIndexer
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pytest

from docindex.core.document import Document, parse_document
from docindex.core.paths import DocIndexPaths
from docindex.indexing.config import IndexerSettings, RunOptions
from docindex.indexing.diff import ChangeDetectionService, ChangeSet
from docindex.indexing.errors import DocumentProcessingError
from docindex.indexing.indexer import DocumentationIndexer
from docindex.indexing.progress import ProgressTracker
from docindex.sources.base import SourceAdapter, SourceConfig, SourceMetadata
from docindex.sources.registry import AdapterRegistry


def make_doc(doc_id: str, **fields: Any) -> Document:
    """Build a document with stable defaults (fixed last_updated)."""
    data: Dict[str, Any] = {
        "id": doc_id,
        "title": f"Document {doc_id}",
        "content": f"Content of {doc_id}",
        "last_updated": "2024-01-01T00:00:00+00:00",
        "source": "test",
        "source_type": "fake",
    }
    data.update(fields)
    return parse_document(data)


class FakeAdapter(SourceAdapter):
    """In-memory adapter."""

    source_type = "fake"

    def __init__(
        self,
        config: SourceConfig,
        documents: Optional[Iterable[Document]] = None,
        healthy: bool = True,
        fail_init: Optional[Exception] = None,
        fail_fetch: Optional[Exception] = None,
        fail_metadata: Optional[Exception] = None,
        fail_cleanup: Optional[Exception] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(config, **kwargs)
        self.documents: List[Document] = list(documents or [])
        self.healthy = healthy
        self.fail_init = fail_init
        self.fail_fetch = fail_fetch
        self.fail_metadata = fail_metadata
        self.fail_cleanup = fail_cleanup
        self.fetch_calls = 0
        self.cleaned_up = False

    async def initialize(self) -> None:
        if self.fail_init is not None:
            raise self.fail_init
        await super().initialize()

    async def _check_connection(self) -> Dict[str, Any]:
        if not self.healthy:
            raise ConnectionError("source unreachable")
        return {"documents": len(self.documents)}

    async def fetch_documents(self) -> List[Document]:
        self.fetch_calls += 1
        if self.fail_fetch is not None:
            raise self.fail_fetch
        return list(self.documents)

    async def get_metadata(self) -> SourceMetadata:
        if self.fail_metadata is not None:
            raise self.fail_metadata
        return await super().get_metadata()

    async def cleanup(self) -> None:
        self.cleaned_up = True
        if self.fail_cleanup is not None:
            raise self.fail_cleanup
        await super().cleanup()


class RecordingProcessor:
    """Records processed document ids; raises for ids in fail_ids."""

    def __init__(self, fail_ids: Iterable[str] = ()) -> None:
        self.fail_ids = set(fail_ids)
        self.processed: List[str] = []

    async def process(self, document: Document) -> None:
        if document.id in self.fail_ids:
            raise DocumentProcessingError(document.id, "boom")
        self.processed.append(document.id)


class FailingChangeDetection(ChangeDetectionService):
    """Raises RuntimeError when asked about a source in fail_sources."""

    def __init__(self, state_dir: Path, fail_sources: Iterable[str] = ()) -> None:
        super().__init__(state_dir)
        self.fail_sources = set(fail_sources)

    async def detect_changes(
        self, source: str, current_documents: Sequence[Document], *, persist: bool = True
    ) -> ChangeSet:
        if source in self.fail_sources:
            raise RuntimeError(f"change detection exploded for {source}")
        return await super().detect_changes(source, current_documents, persist=persist)


class FakeEnvironment:
    """Builds settings, registry and indexer around FakeAdapters."""

    def __init__(self, state_dir: Path) -> None:
        self.state_dir = state_dir
        self.adapters: Dict[str, FakeAdapter] = {}
        self.configs: List[SourceConfig] = []
        self.processor = RecordingProcessor()
        self.change_detection: Optional[ChangeDetectionService] = None

    def add(
        self,
        name: str,
        documents: Iterable[Document] = (),
        source_type: str = "fake",
        enabled: bool = True,
        **kwargs: Any,
    ) -> FakeAdapter:
        config = SourceConfig(name=name, type=source_type, enabled=enabled)
        adapter = FakeAdapter(config, documents=documents, **kwargs)
        self.adapters[name] = adapter
        self.configs.append(config)
        return adapter

    def settings(self) -> IndexerSettings:
        return IndexerSettings(state_dir=self.state_dir, sources=list(self.configs))

    def registry(self) -> AdapterRegistry:
        registry = AdapterRegistry()
        registry.register("fake", lambda config, **_: self.adapters[config.name])
        return registry

    def indexer(self, **options: Any) -> DocumentationIndexer:
        run_options = RunOptions(**options)
        return DocumentationIndexer(
            self.settings(),
            run_options,
            registry=self.registry(),
            change_detection=self.change_detection,
            progress=ProgressTracker(verbose=run_options.verbose),
            processor=self.processor,
        )


@pytest.fixture
def fake_env(tmp_path: Path) -> FakeEnvironment:
    return FakeEnvironment(tmp_path / "state")


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path: Path):
    """Point the default .docindex workspace at a temp dir."""
    DocIndexPaths.set_workspace(tmp_path / ".docindex")
    yield
    DocIndexPaths.reset()
