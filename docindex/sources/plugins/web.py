# docindex/sources/plugins/web.py
"""
Web page source adapter.

Fetches a fixed list of pages relative to base_url:

    - name: status-pages
      type: web
      base_url: https://ops.example.com
      metadata:
        pages: [/runbooks/db-failover.html, /oncall.html]
        document_type: runbook

The page title comes from <title>; the content is the page text with markup
stripped. The document id is the page URL.
"""

from __future__ import annotations

from typing import Any, Dict, List

from docindex.core.document import Document, parse_document
from docindex.core.http import ResourceNotFoundError
from docindex.logging.logger import get_logger
from docindex.logging.tags import SOURCE
from docindex.sources.http import HttpSourceAdapter, html_title, html_to_text

logger = get_logger(__name__)


class WebAdapter(HttpSourceAdapter):
    """Indexes a configured list of web pages."""

    source_type = "web"

    def _client_headers(self) -> Dict[str, str]:
        return {"Accept": "text/html,application/xhtml+xml"}

    @property
    def pages(self) -> List[str]:
        pages = self.config.metadata.get("pages") or ["/"]
        return [str(p) for p in pages]

    async def initialize(self) -> None:
        if not isinstance(self.config.metadata.get("pages", []), list):
            raise ValueError(f"Source {self.name!r}: metadata.pages must be a list")
        await super().initialize()

    async def _check_connection(self) -> Dict[str, Any]:
        await self._request(self.pages[0])
        return {"base_url": self.base_url}

    async def fetch_documents(self) -> List[Document]:
        documents: List[Document] = []

        for page in self.pages:
            try:
                response = await self._request(page)
            except ResourceNotFoundError:
                logger.warning(f"{SOURCE} {self.name}: page not found, skipping: {page}")
                continue

            markup = response.text
            url = str(response.url)
            documents.append(
                parse_document(
                    {
                        "id": url,
                        "title": html_title(markup) or page,
                        "content": html_to_text(markup),
                        "last_updated": response.headers.get("last-modified"),
                        "url": url,
                        "type": self.config.metadata.get("document_type"),
                        "source": self.name,
                        "source_type": self.source_type,
                        "metadata": {"categories": list(self.config.categories)},
                    }
                )
            )

        return documents


__all__ = ["WebAdapter"]
