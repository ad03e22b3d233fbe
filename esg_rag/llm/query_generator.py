"""LLM query expansion into a semantic query and per-language keywords."""

from __future__ import annotations

import logging

from esg_rag.llm.openai_client import OpenAIChatClient
from esg_rag.llm.prompts import (
    EXPANDED_QUERY_SCHEMA,
    QUERY_EXPANSION_PROMPT,
    build_expansion_prompt,
)
from esg_rag.models.search import ExpandedQuery

logger = logging.getLogger(__name__)


class QueryGenerator:
    """Turns a user query into an :class:`ExpandedQuery`."""

    def __init__(self, client: OpenAIChatClient) -> None:
        self.client = client

    async def generate(self, query: str) -> ExpandedQuery:
        payload = await self.client.complete_json(
            QUERY_EXPANSION_PROMPT,
            build_expansion_prompt(query),
            schema_name="expanded_query",
            schema=EXPANDED_QUERY_SCHEMA,
        )
        expanded = ExpandedQuery.model_validate(payload)
        if not expanded.semantic_query.strip():
            expanded = expanded.model_copy(update={"semantic_query": query})
        logger.debug("Expanded %r into %s", query, expanded.model_dump())
        return expanded
