"""Chunk-level models produced and consumed by the retrieval pipeline."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class DocumentChunk(BaseModel):
    """A unit of retrieved text, normalized from any provider."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    doc_id: str
    sort_ordinal: int = 0
    text: str = ""
    source_fields: Dict[str, Any] = Field(default_factory=dict)


class CombinedDocument(BaseModel):
    """All chunks of one document merged in ordinal order."""

    doc_id: str
    text: str
    source_fields: Dict[str, Any] = Field(default_factory=dict)
