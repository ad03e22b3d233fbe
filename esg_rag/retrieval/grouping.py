"""Group chunks per document and concatenate their text."""

from __future__ import annotations

from itertools import groupby
from typing import Iterable, List

from esg_rag.models.chunk import CombinedDocument, DocumentChunk


def combine_chunks(chunks: Iterable[DocumentChunk]) -> List[CombinedDocument]:
    """Sort by ``(doc_id, sort_ordinal)`` and fold each document into one record.

    The first chunk of each sorted group supplies the representative
    ``source_fields``.
    """
    ordered = sorted(chunks, key=lambda chunk: (chunk.doc_id, chunk.sort_ordinal))
    combined: List[CombinedDocument] = []
    for doc_id, members in groupby(ordered, key=lambda chunk: chunk.doc_id):
        group = list(members)
        combined.append(
            CombinedDocument(
                doc_id=doc_id,
                text="\n".join(chunk.text for chunk in group),
                source_fields=dict(group[0].source_fields),
            )
        )
    return combined
