"""Fetch ordinal neighbors of primary hits to widen their context."""

from __future__ import annotations

import logging
from typing import Iterable, List, Set

from esg_rag.domains import DomainConfig
from esg_rag.models.chunk import DocumentChunk
from esg_rag.retrieval.chunk_ids import neighbor_ids
from esg_rag.retrieval.dedup import DedupResult
from esg_rag.retrieval.fulltext_store import ElasticsearchFulltextStore
from esg_rag.retrieval.normalizer import from_mget_doc

logger = logging.getLogger(__name__)


def expansion_ids(primary_ids: Iterable[str], radius: int) -> Set[str]:
    """Neighbor ids of every primary id, minus the primaries themselves."""
    primaries = set(primary_ids)
    wanted: Set[str] = set()
    for chunk_id in primaries:
        wanted |= neighbor_ids(chunk_id, radius)
    return wanted - primaries


class NeighborExpander:
    """Adds neighbor chunks looked up by id in the full-text index."""

    def __init__(self, fulltext_store: ElasticsearchFulltextStore) -> None:
        self.fulltext_store = fulltext_store

    async def expand(
        self,
        dedup: DedupResult,
        radius: int,
        index: str,
        domain: DomainConfig,
    ) -> List[DocumentChunk]:
        """Return primaries followed by every neighbor the index holds."""
        if radius <= 0:
            return list(dedup.chunks)
        wanted = expansion_ids(dedup.seen_ids, radius)
        if not wanted:
            return list(dedup.chunks)

        docs = await self.fulltext_store.get_many(index, sorted(wanted))
        neighbors: List[DocumentChunk] = []
        for doc in docs:
            chunk = from_mget_doc(doc, domain)
            if chunk is None or chunk.chunk_id in dedup.seen_ids:
                continue
            neighbors.append(chunk)
        # Partial results are expected: chunks at document edges do not exist.
        logger.debug(
            "Neighbor expansion K=%d requested %d ids, found %d",
            radius,
            len(wanted),
            len(neighbors),
        )
        return [*dedup.chunks, *neighbors]
