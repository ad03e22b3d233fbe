"""Map provider-specific hits onto :class:`DocumentChunk`."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from esg_rag.domains import DomainConfig
from esg_rag.models.chunk import DocumentChunk
from esg_rag.retrieval.chunk_ids import parse_ordinal

logger = logging.getLogger(__name__)


def _build_chunk(chunk_id: str, fields: Mapping[str, Any], domain: DomainConfig) -> DocumentChunk:
    source_fields: Dict[str, Any] = {
        key: value
        for key, value in fields.items()
        if key not in (domain.text_field, "chunk_id")
    }
    doc_id = fields.get(domain.doc_id_field)
    return DocumentChunk(
        chunk_id=chunk_id,
        doc_id=str(doc_id) if doc_id not in (None, "") else chunk_id,
        sort_ordinal=parse_ordinal(chunk_id),
        text=str(fields.get(domain.text_field) or ""),
        source_fields=source_fields,
    )


def from_vector_hit(point: Any, domain: DomainConfig) -> Optional[DocumentChunk]:
    """Normalize a Qdrant ``ScoredPoint``; hits without payload are skipped."""
    payload = getattr(point, "payload", None)
    if not payload:
        logger.debug("Skipping vector hit %s without payload", getattr(point, "id", None))
        return None
    chunk_id = str(payload.get("chunk_id") or point.id)
    return _build_chunk(chunk_id, payload, domain)


def from_fulltext_hit(hit: Mapping[str, Any], domain: DomainConfig) -> Optional[DocumentChunk]:
    """Normalize an Elasticsearch search hit."""
    source = hit.get("_source")
    if not source:
        logger.debug("Skipping full-text hit %s without _source", hit.get("_id"))
        return None
    return _build_chunk(str(hit["_id"]), source, domain)


def from_mget_doc(doc: Mapping[str, Any], domain: DomainConfig) -> Optional[DocumentChunk]:
    """Normalize one ``mget`` entry; ids the index does not hold yield ``None``."""
    if not doc.get("found"):
        return None
    return from_fulltext_hit(doc, domain)
