"""Composition root: builds the shared clients from settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List

from openai import AsyncOpenAI
from redis.asyncio import Redis

from esg_rag.api.usage_log import UsageLogger
from esg_rag.auth.authenticator import Authenticator, SupabaseVerifier
from esg_rag.config import Settings
from esg_rag.domains import DomainConfig, configure_domains
from esg_rag.llm.answer_generator import AnswerGenerator
from esg_rag.llm.openai_client import OpenAIChatClient
from esg_rag.llm.query_generator import QueryGenerator
from esg_rag.retrieval.embedder import OpenAIEmbedder
from esg_rag.retrieval.fulltext_store import ElasticsearchFulltextStore
from esg_rag.retrieval.metadata import SqlMetadataStore
from esg_rag.retrieval.pipeline import HybridSearchPipeline
from esg_rag.retrieval.vector_store import QdrantVectorStore
from esg_rag.retrieval.web_search import TavilySearchClient
from esg_rag.utils.tokenization import get_cl100k_encoding

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything a request handler needs, shared across requests."""

    domains: Dict[str, DomainConfig]
    pipeline: HybridSearchPipeline
    authenticator: Authenticator
    usage_logger: UsageLogger
    web_search: TavilySearchClient
    answer_generator: AnswerGenerator
    closers: List[Callable[[], Awaitable[None]]] = field(default_factory=list)

    async def aclose(self) -> None:
        for close in self.closers:
            try:
                await close()
            except Exception as exc:
                logger.warning("Error closing client: %s", exc)


def build_services(settings: Settings) -> Services:
    if not settings.openai_api_key:
        raise ValueError("OPENAI_API_KEY is not configured in the environment.")
    openai_client = AsyncOpenAI(api_key=settings.openai_api_key, base_url=settings.openai_base_url)
    chat_client = OpenAIChatClient(openai_client, settings.openai_model_chat)

    vector_store = QdrantVectorStore.from_url(settings.qdrant_url, settings.qdrant_api_key)
    fulltext_store = ElasticsearchFulltextStore.from_url(
        settings.elasticsearch_url, settings.elasticsearch_api_key
    )
    metadata_store = SqlMetadataStore.from_url(settings.database_url)
    web_search = TavilySearchClient.from_settings(settings.tavily_api_key, settings.tavily_base_url)

    pipeline = HybridSearchPipeline(
        query_generator=QueryGenerator(chat_client),
        embedder=OpenAIEmbedder(openai_client, settings.openai_embedding_model),
        vector_store=vector_store,
        fulltext_store=fulltext_store,
        metadata_store=metadata_store,
        metadata_batch_size=settings.metadata_batch_size,
    )
    authenticator = Authenticator(
        Redis.from_url(settings.redis_url),
        SupabaseVerifier(settings.supabase_url, settings.supabase_anon_key),
        ttl_seconds=settings.auth_cache_ttl_seconds,
    )
    answer_generator = AnswerGenerator(
        chat_client,
        settings.max_evidence_tokens,
        get_cl100k_encoding("budgeting answer sources", settings.allow_tiktoken_fallback),
    )
    return Services(
        domains=configure_domains(settings.vector_namespaces, settings.fulltext_indices),
        pipeline=pipeline,
        authenticator=authenticator,
        usage_logger=UsageLogger(fulltext_store, settings.usage_log_index),
        web_search=web_search,
        answer_generator=answer_generator,
        closers=[
            vector_store.close,
            fulltext_store.close,
            metadata_store.close,
            web_search.close,
            authenticator.close,
            openai_client.close,
        ],
    )
