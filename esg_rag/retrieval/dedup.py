"""Merge candidate lists into a unique-by-chunk-id working set."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Set

from esg_rag.models.chunk import DocumentChunk


@dataclass
class DedupResult:
    chunks: List[DocumentChunk] = field(default_factory=list)
    seen_ids: Set[str] = field(default_factory=set)


def deduplicate(*groups: Iterable[DocumentChunk]) -> DedupResult:
    """Keep the first chunk seen for every ``chunk_id``.

    Groups are consumed in the order given, so vector hits passed first take
    precedence over full-text hits with the same id. Later duplicates are
    dropped, not merged.
    """
    result = DedupResult()
    for group in groups:
        for chunk in group:
            if chunk.chunk_id in result.seen_ids:
                continue
            result.seen_ids.add(chunk.chunk_id)
            result.chunks.append(chunk)
    return result
