# docindex/sources/plugins/wiki.py
"""
Wiki source adapter (Confluence-style REST content API).

    - name: ops-wiki
      type: wiki
      base_url: https://wiki.example.com
      auth: {token_env: WIKI_TOKEN}
      metadata:
        space_key: OPS
        page_size: 50

Pages are listed with GET /rest/api/content?spaceKey=...&expand=body.storage,version
and followed through _links.next until the space is exhausted. Storage
format HTML is reduced to plain text.
"""

from __future__ import annotations

from typing import Any, Dict, List

from docindex.core.document import Document, parse_document
from docindex.logging.logger import get_logger
from docindex.logging.tags import SOURCE
from docindex.sources.http import HttpSourceAdapter, html_to_text

logger = get_logger(__name__)

CONTENT_ENDPOINT = "/rest/api/content"
DEFAULT_PAGE_SIZE = 25


class WikiAdapter(HttpSourceAdapter):
    """Indexes every page of one wiki space."""

    source_type = "wiki"

    @property
    def space_key(self) -> str:
        return str(self.config.metadata.get("space_key") or "")

    @property
    def page_size(self) -> int:
        return int(self.config.metadata.get("page_size") or DEFAULT_PAGE_SIZE)

    async def initialize(self) -> None:
        if not self.space_key:
            raise ValueError(f"Source {self.name!r}: metadata.space_key is required")
        await super().initialize()

    async def _check_connection(self) -> Dict[str, Any]:
        await self.get_json(CONTENT_ENDPOINT, {"spaceKey": self.space_key, "limit": 1})
        return {"base_url": self.base_url, "space_key": self.space_key}

    async def fetch_documents(self) -> List[Document]:
        documents: List[Document] = []
        start = 0

        while True:
            payload = await self.get_json(
                CONTENT_ENDPOINT,
                {
                    "spaceKey": self.space_key,
                    "type": "page",
                    "expand": "body.storage,version",
                    "start": start,
                    "limit": self.page_size,
                },
            )
            results = payload.get("results") or []
            documents.extend(self._to_document(page) for page in results)

            if not results or not (payload.get("_links") or {}).get("next"):
                break
            start += len(results)

        logger.debug(f"{SOURCE} {self.name}: fetched {len(documents)} page(s) from {self.space_key}")
        return documents

    def _to_document(self, page: Dict[str, Any]) -> Document:
        body = ((page.get("body") or {}).get("storage") or {}).get("value", "")
        version = page.get("version") or {}
        webui = (page.get("_links") or {}).get("webui")

        return parse_document(
            {
                "id": str(page["id"]),
                "title": page.get("title", ""),
                "content": html_to_text(body),
                "last_updated": version.get("when"),
                "url": f"{self.base_url}{webui}" if webui else None,
                "type": self.config.metadata.get("document_type"),
                "source": self.name,
                "source_type": self.source_type,
                "metadata": {
                    "space_key": self.space_key,
                    "version": version.get("number"),
                    "categories": list(self.config.categories),
                },
            }
        )


__all__ = ["WikiAdapter"]
