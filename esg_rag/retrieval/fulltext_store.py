"""Elasticsearch-based full-text store."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from elasticsearch import AsyncElasticsearch

from esg_rag.models.filters import QueryFilter
from esg_rag.retrieval.filters import build_fulltext_query

logger = logging.getLogger(__name__)


class ElasticsearchFulltextStore:
    """Keyword search and direct id lookup against Elasticsearch indices."""

    def __init__(self, client: AsyncElasticsearch) -> None:
        self.client = client

    @classmethod
    def from_url(
        cls, url: str, api_key: Optional[str] = None
    ) -> "ElasticsearchFulltextStore":
        return cls(AsyncElasticsearch(url, api_key=api_key))

    async def search(
        self,
        index: str,
        keywords: Sequence[str],
        top_k: int,
        query_filter: Optional[QueryFilter] = None,
        text_field: str = "text",
    ) -> List[Dict[str, Any]]:
        response = await self.client.search(
            index=index,
            query=build_fulltext_query(keywords, query_filter, text_field),
            size=top_k,
        )
        hits = response["hits"]["hits"]
        logger.debug("Elasticsearch %s returned %d hits", index, len(hits))
        return list(hits)

    async def get_many(self, index: str, ids: Sequence[str]) -> List[Dict[str, Any]]:
        """``mget`` the ids; each entry carries ``found`` for missing ids."""
        if not ids:
            return []
        response = await self.client.mget(index=index, ids=list(ids))
        return list(response["docs"])

    async def index_document(self, index: str, document: Dict[str, Any]) -> None:
        await self.client.index(index=index, document=document)

    async def close(self) -> None:
        await self.client.close()
