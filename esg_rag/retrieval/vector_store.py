"""Qdrant-based dense vector store."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models as qmodels

from esg_rag.models.filters import QueryFilter
from esg_rag.retrieval.filters import to_qdrant_filter

logger = logging.getLogger(__name__)


class QdrantVectorStore:
    """Wrapper around Qdrant similarity search; one collection per namespace."""

    def __init__(self, client: AsyncQdrantClient) -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: str, api_key: Optional[str] = None) -> "QdrantVectorStore":
        return cls(AsyncQdrantClient(url=url, api_key=api_key))

    async def query(
        self,
        namespace: str,
        vector: Sequence[float],
        top_k: int,
        query_filter: Optional[QueryFilter] = None,
    ) -> List[qmodels.ScoredPoint]:
        response = await self.client.query_points(
            collection_name=namespace,
            query=list(vector),
            query_filter=to_qdrant_filter(query_filter),
            limit=top_k,
            with_payload=True,
            with_vectors=False,
        )
        logger.debug("Qdrant %s returned %d points", namespace, len(response.points))
        return list(response.points)

    async def close(self) -> None:
        await self.client.close()
