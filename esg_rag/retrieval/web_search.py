"""Web search through the Tavily REST API."""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from esg_rag.models.search import SourcedDocument

logger = logging.getLogger(__name__)


class TavilySearchClient:
    """Minimal async client for Tavily's ``/search`` endpoint."""

    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str]) -> None:
        self.client = client
        self.api_key = api_key

    @classmethod
    def from_settings(
        cls,
        api_key: Optional[str],
        base_url: str = "https://api.tavily.com",
        timeout: float = 30.0,
    ) -> "TavilySearchClient":
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout), api_key)

    async def search(self, query: str, max_results: int = 5) -> List[SourcedDocument]:
        if not self.api_key:
            raise ValueError("TAVILY_API_KEY is not configured in the environment.")
        response = await self.client.post(
            "/search",
            json={"query": query, "max_results": max_results},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        response.raise_for_status()
        results = response.json().get("results", [])
        logger.debug("Tavily returned %d results for %r", len(results), query)
        return [
            SourcedDocument(
                content=item.get("content", ""),
                source=f"[{item.get('title', '')}]({item.get('url', '')})",
            )
            for item in results
        ]

    async def close(self) -> None:
        await self.client.aclose()
