"""Request/response models of the search endpoints."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DateBounds(BaseModel):
    """Inclusive numeric bounds of a ``datefilter`` entry."""

    gte: Optional[float] = None
    lte: Optional[float] = None


class SearchRequest(BaseModel):
    """Incoming search payload shared by every domain endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1)
    filter: Optional[Dict[str, List[str]]] = None
    datefilter: Optional[Dict[str, DateBounds]] = None
    meta_contains: Optional[str] = None
    top_k: int = Field(default=5, ge=1, alias="topK")
    ext_k: int = Field(default=0, ge=0, alias="extK")

    @field_validator("query")
    @classmethod
    def _strip_query(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("query must not be empty")
        return value


class ExpandedQuery(BaseModel):
    """Semantic query plus full-text keyword variants per language."""

    semantic_query: str
    fulltext_query_eng: List[str] = Field(default_factory=list)
    fulltext_query_chi_sim: List[str] = Field(default_factory=list)
    fulltext_query_chi_tra: List[str] = Field(default_factory=list)

    def keywords(self, languages: List[str]) -> List[str]:
        """Concatenate the keyword lists of ``languages`` in the given order."""
        result: List[str] = []
        for language in languages:
            result.extend(getattr(self, f"fulltext_query_{language}"))
        return result


class SourcedDocument(BaseModel):
    """One formatted search result."""

    content: str
    source: str
    tag: Optional[List[str]] = None


class ZeroMatchResponse(BaseModel):
    """Returned when the metadata pre-filter matches nothing."""

    message: str
    suggestion: str


class WebSearchRequest(BaseModel):
    """Payload of the web search endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1)
    max_results: int = Field(default=5, ge=1, le=20, alias="maxResults")
