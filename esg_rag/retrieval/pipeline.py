"""Hybrid retrieval pipeline shared by every search endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Union

from esg_rag.domains import DomainConfig
from esg_rag.llm.query_generator import QueryGenerator
from esg_rag.models.chunk import DocumentChunk
from esg_rag.models.filters import QueryFilter, TermsFilter
from esg_rag.models.search import ExpandedQuery, SearchRequest, SourcedDocument, ZeroMatchResponse
from esg_rag.retrieval.dedup import deduplicate
from esg_rag.retrieval.embedder import OpenAIEmbedder
from esg_rag.retrieval.expander import NeighborExpander
from esg_rag.retrieval.filters import build_query_filter
from esg_rag.retrieval.fulltext_store import ElasticsearchFulltextStore
from esg_rag.retrieval.grouping import combine_chunks
from esg_rag.retrieval.metadata import DEFAULT_BATCH_SIZE, MetadataJoiner, SqlMetadataStore
from esg_rag.retrieval.normalizer import from_fulltext_hit, from_vector_hit
from esg_rag.retrieval.vector_store import QdrantVectorStore

logger = logging.getLogger(__name__)

SearchResult = Union[List[SourcedDocument], ZeroMatchResponse]


class HybridSearchPipeline:
    """Combines dense and keyword retrieval, then groups and cites the hits."""

    def __init__(
        self,
        query_generator: QueryGenerator,
        embedder: OpenAIEmbedder,
        vector_store: QdrantVectorStore,
        fulltext_store: ElasticsearchFulltextStore,
        metadata_store: SqlMetadataStore,
        metadata_batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self.query_generator = query_generator
        self.embedder = embedder
        self.vector_store = vector_store
        self.fulltext_store = fulltext_store
        self.metadata_store = metadata_store
        self.expander = NeighborExpander(fulltext_store)
        self.joiner = MetadataJoiner(metadata_store, metadata_batch_size)

    async def search(self, domain: DomainConfig, request: SearchRequest) -> SearchResult:
        extra_clauses: List[TermsFilter] = []
        if domain.prefilter is not None and request.meta_contains:
            ids = await self.metadata_store.search_ids(domain.prefilter, request.meta_contains)
            if not ids:
                logger.info(
                    "%s: meta_contains %r matched nothing", domain.endpoint, request.meta_contains
                )
                return ZeroMatchResponse(
                    message=domain.zero_match_message,
                    suggestion=domain.zero_match_suggestion,
                )
            extra_clauses.append(TermsFilter(field=domain.doc_id_field, values=ids))

        query_filter = build_query_filter(request, domain, extra_clauses)
        expanded = await self.query_generator.generate(request.query)

        if domain.is_hybrid:
            vector_chunks, fulltext_chunks = await asyncio.gather(
                self._vector_search(domain, expanded, request.top_k, query_filter),
                self._fulltext_search(domain, expanded, request.top_k, query_filter),
            )
        else:
            vector_chunks = await self._vector_search(domain, expanded, request.top_k, query_filter)
            fulltext_chunks = []

        dedup = deduplicate(vector_chunks, fulltext_chunks)
        logger.info(
            "%s: %d vector + %d full-text hits, %d unique",
            domain.endpoint,
            len(vector_chunks),
            len(fulltext_chunks),
            len(dedup.chunks),
        )

        if domain.is_hybrid:
            chunks = await self.expander.expand(
                dedup, request.ext_k, domain.fulltext_index, domain
            )
        else:
            if request.ext_k:
                logger.debug(
                    "%s has no full-text index; ignoring extK=%d", domain.endpoint, request.ext_k
                )
            chunks = dedup.chunks

        documents = combine_chunks(chunks)
        if domain.metadata is None:
            return [domain.formatter.render(document) for document in documents]

        records = await self.joiner.join(documents, domain.metadata)
        return [
            domain.formatter.render(document, record)
            for document, record in zip(documents, records)
        ]

    async def _vector_search(
        self,
        domain: DomainConfig,
        expanded: ExpandedQuery,
        top_k: int,
        query_filter: Optional[QueryFilter],
    ) -> List[DocumentChunk]:
        vector = await self.embedder.embed(expanded.semantic_query)
        points = await self.vector_store.query(domain.namespace, vector, top_k, query_filter)
        chunks = (from_vector_hit(point, domain) for point in points)
        return [chunk for chunk in chunks if chunk is not None]

    async def _fulltext_search(
        self,
        domain: DomainConfig,
        expanded: ExpandedQuery,
        top_k: int,
        query_filter: Optional[QueryFilter],
    ) -> List[DocumentChunk]:
        keywords = expanded.keywords(list(domain.languages)) or [expanded.semantic_query]
        hits = await self.fulltext_store.search(
            domain.fulltext_index,
            keywords,
            top_k,
            query_filter,
            text_field=domain.text_field,
        )
        chunks = (from_fulltext_hit(hit, domain) for hit in hits)
        return [chunk for chunk in chunks if chunk is not None]
