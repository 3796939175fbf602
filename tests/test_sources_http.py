# tests/test_sources_http.py
"""
Tests for the HTTP backed adapters (web, wiki, git).

Every adapter gets an httpx.MockTransport, so no test touches the network.
"""

import base64

import httpx
import pytest

from docindex.core.http import APIError, AuthenticationError
from docindex.sources import SourceConfig
from docindex.sources.http import html_title, html_to_text
from docindex.sources.plugins.git import GitAdapter
from docindex.sources.plugins.web import WebAdapter
from docindex.sources.plugins.wiki import WikiAdapter

pytestmark = pytest.mark.tier2


@pytest.mark.tier1
class TestHtmlHelpers:
    def test_html_to_text(self):
        markup = (
            "<html><head><style>p {color: red}</style><script>alert(1)</script></head>"
            "<body><h1>Failover</h1><p>Step one &amp; two</p><p>Done</p></body></html>"
        )

        assert html_to_text(markup) == "Failover\nStep one & two\nDone"

    def test_entities_and_comments(self):
        markup = "<p>a &lt; b</p><!-- x > y --><p>done</p>"

        assert html_to_text(markup) == "a < b\ndone"

    def test_inline_tags_stay_on_one_line(self):
        markup = "<li>Run <code>make  deploy</code> then <b>verify</b></li><li>Page oncall</li>"

        assert html_to_text(markup) == "Run make deploy then verify\nPage oncall"

    def test_html_title(self):
        assert html_title("<title> DB  Failover </title>") == "DB Failover"
        assert html_title("<p>no title</p>") is None
        assert html_title("<title>Q&amp;A</title><p>body</p>") == "Q&A"


class TestWebAdapter:
    """Fetching a fixed list of pages."""

    @pytest.mark.asyncio
    async def test_fetches_pages(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/missing.html":
                return httpx.Response(404, text="gone")
            return httpx.Response(
                200,
                text="<title>Failover</title><body><p>Promote the replica</p></body>",
                headers={"Last-Modified": "Wed, 01 May 2024 10:00:00 GMT"},
            )

        config = SourceConfig(
            name="ops-pages",
            type="web",
            base_url="https://ops.example.com",
            metadata={"pages": ["/failover.html", "/missing.html"], "document_type": "runbook"},
        )
        adapter = WebAdapter(config, transport=httpx.MockTransport(handler))
        await adapter.initialize()

        documents = await adapter.fetch_documents()
        await adapter.cleanup()

        assert len(documents) == 1
        doc = documents[0]
        assert doc.id == "https://ops.example.com/failover.html"
        assert doc.title == "Failover"
        assert doc.content == "Promote the replica"
        assert doc.type == "runbook"
        assert doc.last_updated == "Wed, 01 May 2024 10:00:00 GMT"

    @pytest.mark.asyncio
    async def test_server_error_makes_source_unhealthy(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))
        adapter = WebAdapter(
            SourceConfig(name="ops-pages", type="web", base_url="https://ops.example.com"),
            transport=transport,
        )
        await adapter.initialize()

        health = await adapter.health_check()
        await adapter.cleanup()

        assert not health.healthy
        assert "APIError" in health.details["error"]

    @pytest.mark.asyncio
    async def test_missing_base_url_fails_initialize(self):
        adapter = WebAdapter(SourceConfig(name="ops-pages", type="web"))

        with pytest.raises(ValueError):
            await adapter.initialize()


class TestWikiAdapter:
    """Paging through a wiki space."""

    @staticmethod
    def _page(page_id, title):
        return {
            "id": page_id,
            "title": title,
            "body": {"storage": {"value": f"<p>{title} body</p>"}},
            "version": {"number": 3, "when": "2024-04-01T08:00:00.000Z"},
            "_links": {"webui": f"/display/OPS/{page_id}"},
        }

    @pytest.mark.asyncio
    async def test_follows_next_links(self, monkeypatch):
        monkeypatch.setenv("WIKI_TOKEN", "s3cret")
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            start = int(request.url.params.get("start", "0"))
            if start == 0:
                return httpx.Response(
                    200,
                    json={
                        "results": [self._page(1, "Failover"), self._page(2, "Backups")],
                        "_links": {"next": "/rest/api/content?start=2"},
                    },
                )
            return httpx.Response(200, json={"results": [self._page(3, "Oncall")], "_links": {}})

        config = SourceConfig(
            name="ops-wiki",
            type="wiki",
            base_url="https://wiki.example.com",
            auth={"token_env": "WIKI_TOKEN"},
            metadata={"space_key": "OPS", "page_size": 2},
        )
        adapter = WikiAdapter(config, transport=httpx.MockTransport(handler))
        await adapter.initialize()

        documents = await adapter.fetch_documents()
        await adapter.cleanup()

        assert [d.id for d in documents] == ["1", "2", "3"]
        assert documents[0].content == "Failover body"
        assert documents[0].url == "https://wiki.example.com/display/OPS/1"
        assert documents[0].last_updated == "2024-04-01T08:00:00.000Z"
        assert documents[0].metadata["version"] == 3
        assert [r.url.params["start"] for r in seen] == ["0", "2"]
        assert seen[0].url.params["spaceKey"] == "OPS"
        assert seen[0].headers["Authorization"] == "Bearer s3cret"

    @pytest.mark.asyncio
    async def test_auth_failure_is_mapped(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(401, text="nope"))
        config = SourceConfig(
            name="ops-wiki",
            type="wiki",
            base_url="https://wiki.example.com",
            metadata={"space_key": "OPS"},
        )
        adapter = WikiAdapter(config, transport=transport)
        await adapter.initialize()

        with pytest.raises(AuthenticationError) as exc_info:
            await adapter.fetch_documents()
        await adapter.cleanup()

        assert exc_info.value.status_code == 401
        assert isinstance(exc_info.value, APIError)

    @pytest.mark.asyncio
    async def test_space_key_required(self):
        adapter = WikiAdapter(
            SourceConfig(name="ops-wiki", type="wiki", base_url="https://wiki.example.com")
        )

        with pytest.raises(ValueError):
            await adapter.initialize()


class TestGitAdapter:
    """Reading documentation files from a repository tree."""

    @pytest.mark.asyncio
    async def test_reads_tree_and_contents(self):
        files = {
            "docs/runbooks/restart.md": "---\ntype: runbook\n---\n# Restart\nSteps",
            "docs/guide.txt": "plain guide",
        }

        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path == "/repos/acme/platform/git/trees/main":
                tree = [{"path": p, "type": "blob"} for p in files]
                tree += [
                    {"path": "docs", "type": "tree"},
                    {"path": "src/app.py", "type": "blob"},
                    {"path": "README.md", "type": "blob"},
                ]
                return httpx.Response(200, json={"tree": tree, "truncated": False})
            prefix = "/repos/acme/platform/contents/"
            if path.startswith(prefix):
                name = path[len(prefix):]
                encoded = base64.b64encode(files[name].encode("utf-8")).decode("ascii")
                return httpx.Response(
                    200,
                    json={
                        "content": encoded,
                        "encoding": "base64",
                        "sha": f"sha-{name}",
                        "html_url": f"https://github.com/acme/platform/blob/main/{name}",
                    },
                )
            return httpx.Response(404)

        config = SourceConfig(
            name="platform-docs",
            type="git",
            metadata={"owner": "acme", "repo": "platform", "path": "docs/"},
        )
        adapter = GitAdapter(config, transport=httpx.MockTransport(handler))
        await adapter.initialize()

        documents = await adapter.fetch_documents()
        await adapter.cleanup()

        assert [d.id for d in documents] == ["docs/guide.txt", "docs/runbooks/restart.md"]
        guide, runbook = documents
        assert guide.title == "guide"
        assert guide.content == "plain guide"
        assert runbook.type == "runbook"
        assert runbook.title == "Restart"
        assert runbook.metadata["sha"] == "sha-docs/runbooks/restart.md"
        assert runbook.metadata["ref"] == "main"

    @pytest.mark.asyncio
    async def test_owner_and_repo_required(self):
        adapter = GitAdapter(SourceConfig(name="platform-docs", type="git"))

        with pytest.raises(ValueError):
            await adapter.initialize()
