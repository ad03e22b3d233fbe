"""Request/response models for the answer endpoint."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .search import SourcedDocument


class QARequest(BaseModel):
    """Incoming question payload."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=3)
    domain: str = "esg"
    top_k: int = Field(default=5, ge=1, alias="topK")


class QAResponse(BaseModel):
    """Answer returned to the caller."""

    answer: str
    sources: List[SourcedDocument]
