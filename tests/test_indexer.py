# tests/test_indexer.py
"""
Tests for DocumentationIndexer.

All sources are FakeAdapters wired through the fake_env fixture, so these
tests exercise orchestration, isolation and reporting without any I/O
besides the snapshot directory.
"""

import pytest
from conftest import FailingChangeDetection, make_doc

from docindex.indexing.errors import AdapterInitializationError, SnapshotStoreError
from docindex.indexing.report import Severity, SourceStatus
from docindex.indexing.state import SnapshotStore

pytestmark = [pytest.mark.tier2, pytest.mark.asyncio]


def _docs(count, prefix="d"):
    return [make_doc(f"{prefix}{i}") for i in range(1, count + 1)]


async def _run(env, **options):
    async with env.indexer(**options) as indexer:
        return await indexer.index_all_sources()


class TestFullRun:
    """Non-incremental runs."""

    async def test_processes_every_document(self, fake_env):
        fake_env.add("handbook", _docs(3))

        report = await _run(fake_env)

        source = report.sources[0]
        assert source.status == SourceStatus.SUCCESS
        assert source.documents_processed == 3
        assert source.documents_skipped == 0
        assert source.changes is None
        assert source.metadata.document_count == 3
        assert fake_env.processor.processed == ["d1", "d2", "d3"]
        assert report.errors == []

    async def test_single_failing_document_is_isolated(self, fake_env):
        fake_env.add("handbook", _docs(10))
        fake_env.processor.fail_ids = {"d5"}

        report = await _run(fake_env)

        source = report.sources[0]
        assert source.documents_processed == 9
        assert source.status == SourceStatus.PARTIAL
        assert len(source.errors) == 1
        assert source.errors[0].operation == "process_document"
        assert source.errors[0].recoverable is True
        assert "d5" in source.errors[0].message
        assert "d6" in fake_env.processor.processed

    async def test_batches_keep_document_order(self, fake_env):
        fake_env.add("handbook", _docs(7))

        await _run(fake_env, batch_size=3)

        assert fake_env.processor.processed == [f"d{i}" for i in range(1, 8)]

    async def test_summary_math(self, fake_env):
        fake_env.add("good", _docs(4, "g"))
        fake_env.add("partial", _docs(6, "p"))
        fake_env.processor.fail_ids = {"p1", "p2"}

        report = await _run(fake_env)

        assert report.summary.total_sources == 2
        assert report.summary.processed_sources == 2
        assert report.summary.total_documents == 8
        assert report.summary.processed_documents == 4
        assert report.summary.success_rate == pytest.approx(0.5)
        assert report.progress.processed_sources == 2

    async def test_dry_run_counts_without_processing(self, fake_env):
        fake_env.add("handbook", _docs(4))

        report = await _run(fake_env, dry_run=True)

        assert report.dry_run is True
        assert report.sources[0].documents_processed == 4
        assert fake_env.processor.processed == []


class TestSourceFailures:
    """Health check and fetch failures only fail their own source."""

    async def test_unhealthy_source_is_failed_without_fetch(self, fake_env):
        down = fake_env.add("wiki", _docs(2), healthy=False)
        fake_env.add("handbook", _docs(2, "h"))

        report = await _run(fake_env)

        by_name = {s.source_name: s for s in report.sources}
        assert by_name["wiki"].status == SourceStatus.FAILED
        assert by_name["wiki"].errors[0].operation == "index_source"
        assert by_name["wiki"].errors[0].recoverable is False
        assert by_name["wiki"].metadata.status == "failed"
        assert down.fetch_calls == 0
        assert by_name["handbook"].status == SourceStatus.SUCCESS

        assert [(e.source, e.error_type, e.severity) for e in report.errors] == [
            ("wiki", "source_failure", Severity.HIGH)
        ]
        assert "Check connectivity and credentials for failed sources: wiki" in report.recommendations
        assert report.failed_sources == ["wiki"]

    async def test_fetch_failure_fails_source(self, fake_env):
        fake_env.add("wiki", fail_fetch=RuntimeError("HTTP 500"))

        report = await _run(fake_env)

        assert report.sources[0].status == SourceStatus.FAILED
        assert "HTTP 500" in report.sources[0].errors[0].message

    async def test_parallel_isolation(self, fake_env):
        fake_env.add("a", _docs(2, "a"))
        fake_env.add("broken", _docs(2, "b"))
        fake_env.add("c", _docs(3, "c"))
        fake_env.change_detection = FailingChangeDetection(fake_env.state_dir, ["broken"])

        report = await _run(fake_env, parallel=True, incremental=True)

        by_name = {s.source_name: s for s in report.sources}
        assert set(by_name) == {"a", "c"}
        assert by_name["a"].documents_processed == 2
        assert by_name["c"].documents_processed == 3
        assert [(e.source, e.error_type) for e in report.errors] == [("broken", "indexing_failure")]
        assert report.summary.total_sources == 3

    async def test_sequential_isolation(self, fake_env):
        fake_env.add("broken", _docs(1, "b"))
        fake_env.add("c", _docs(2, "c"))
        fake_env.change_detection = FailingChangeDetection(fake_env.state_dir, ["broken"])

        report = await _run(fake_env, parallel=False, incremental=True)

        assert [s.source_name for s in report.sources] == ["c"]
        assert report.errors[0].error_type == "indexing_failure"

    async def test_metadata_failure_makes_source_partial(self, fake_env):
        fake_env.add("wiki", _docs(2, "w"), fail_metadata=RuntimeError("metadata exploded"))
        fake_env.add("c", _docs(1, "c"))

        report = await _run(fake_env, parallel=True)

        by_name = {s.source_name: s for s in report.sources}
        wiki = by_name["wiki"]
        assert wiki.status == SourceStatus.PARTIAL
        assert wiki.documents_processed == 2
        assert wiki.metadata.status == "error"
        assert wiki.metadata.document_count == 2
        assert [(e.operation, e.recoverable) for e in wiki.errors] == [("get_metadata", True)]
        assert "metadata exploded" in wiki.errors[0].message
        assert by_name["c"].status == SourceStatus.SUCCESS
        assert report.errors == []

    async def test_parallel_fatal_error_raised_after_siblings_finish(self, fake_env):
        fake_env.add("broken", fail_fetch=SnapshotStoreError("disk full"))
        sibling = fake_env.add("good", _docs(3, "g"))

        with pytest.raises(SnapshotStoreError):
            await _run(fake_env, parallel=True)

        assert sibling.fetch_calls == 1
        assert fake_env.processor.processed == ["g1", "g2", "g3"]
        assert sibling.cleaned_up

    async def test_sequential_fatal_error_stops_run(self, fake_env):
        fake_env.add("broken", fail_fetch=SnapshotStoreError("disk full"))
        later = fake_env.add("later", _docs(1))

        with pytest.raises(SnapshotStoreError):
            await _run(fake_env, parallel=False)

        assert later.fetch_calls == 0


class TestIncremental:
    """Incremental runs only process changed documents."""

    async def test_first_and_second_run(self, fake_env):
        adapter = fake_env.add("handbook", [make_doc("A"), make_doc("B", content="v1")])

        first = await _run(fake_env, incremental=True)
        assert first.sources[0].documents_processed == 2
        assert first.sources[0].changes.statistics.additions_count == 2

        fake_env.processor.processed.clear()
        adapter.documents = [make_doc("A"), make_doc("B", content="v2"), make_doc("C")]

        second = await _run(fake_env, incremental=True)
        source = second.sources[0]
        assert source.documents_processed == 2
        assert source.documents_skipped == 1
        assert sorted(fake_env.processor.processed) == ["B", "C"]
        assert second.incremental is True

    async def test_unchanged_source_processes_nothing(self, fake_env):
        fake_env.add("handbook", _docs(3))

        await _run(fake_env, incremental=True)
        fake_env.processor.processed.clear()
        report = await _run(fake_env, incremental=True)

        assert report.sources[0].documents_processed == 0
        assert report.sources[0].documents_skipped == 3
        assert fake_env.processor.processed == []

    async def test_dry_run_never_persists(self, fake_env):
        fake_env.add("handbook", _docs(3))

        report = await _run(fake_env, incremental=True, dry_run=True)

        assert report.sources[0].documents_processed == 3
        assert fake_env.processor.processed == []
        assert not SnapshotStore(fake_env.state_dir).path_for("handbook").exists()

    async def test_show_changes_logs_titles(self, fake_env, caplog):
        fake_env.add("handbook", _docs(2))

        with caplog.at_level("INFO", logger="docindex"):
            await _run(fake_env, incremental=True, show_changes=True, verbose=True)

        assert "Changes for handbook: +2 added" in caplog.text
        assert "+ Document d1" in caplog.text


class TestInitialization:
    """Adapter construction and initialization."""

    async def test_init_failure_aborts_outside_dry_run(self, fake_env):
        broken = fake_env.add("wiki", fail_init=RuntimeError("bad credentials"))

        indexer = fake_env.indexer()
        with pytest.raises(AdapterInitializationError) as exc_info:
            await indexer.initialize()

        assert exc_info.value.source == "wiki"
        assert broken.cleaned_up

    async def test_context_manager_propagates_init_failure(self, fake_env):
        fake_env.add("handbook", _docs(1))
        fake_env.add("wiki", fail_init=RuntimeError("bad credentials"))

        with pytest.raises(AdapterInitializationError):
            await _run(fake_env)

        assert fake_env.adapters["handbook"].cleaned_up

    async def test_init_failure_cleans_up_earlier_adapters(self, fake_env):
        earlier = fake_env.add("handbook", _docs(1))
        fake_env.add("wiki", fail_init=RuntimeError("bad credentials"))

        indexer = fake_env.indexer()
        with pytest.raises(AdapterInitializationError):
            await indexer.initialize()

        assert earlier.cleaned_up
        assert indexer.adapters == {}

    async def test_init_failure_is_critical_in_dry_run(self, fake_env):
        fake_env.add("wiki", fail_init=RuntimeError("bad credentials"))
        fake_env.add("handbook", _docs(2))

        report = await _run(fake_env, dry_run=True)

        assert [s.source_name for s in report.sources] == ["handbook"]
        assert [(e.source, e.error_type, e.severity) for e in report.errors] == [
            ("wiki", "initialization_failure", Severity.CRITICAL)
        ]
        assert "Address 1 critical error(s) before production deployment" in report.recommendations

    async def test_unknown_type_is_skipped(self, fake_env):
        fake_env.add("mystery", _docs(1), source_type="confluence")
        fake_env.add("handbook", _docs(1))

        indexer = fake_env.indexer()
        await indexer.initialize()

        assert list(indexer.adapters) == ["handbook"]
        await indexer.cleanup()

    async def test_disabled_and_filtered_sources(self, fake_env):
        fake_env.add("off", _docs(1), enabled=False)
        fake_env.add("a", _docs(1))
        fake_env.add("b", _docs(1))

        indexer = fake_env.indexer(sources=["b", "off", "nope"])
        await indexer.initialize()

        assert list(indexer.adapters) == ["b"]
        await indexer.cleanup()

    async def test_cleanup_tolerates_failures(self, fake_env):
        noisy = fake_env.add("noisy", _docs(1), fail_cleanup=RuntimeError("socket already closed"))
        quiet = fake_env.add("quiet", _docs(1))

        indexer = fake_env.indexer()
        await indexer.initialize()
        await indexer.cleanup()

        assert noisy.cleaned_up
        assert quiet.cleaned_up
        assert indexer.adapters == {}
