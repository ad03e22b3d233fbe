"""Typed models shared across the application."""

from .chunk import CombinedDocument, DocumentChunk
from .filters import QueryFilter, RangeFilter, TermsFilter
from .qa import QARequest, QAResponse
from .search import (
    DateBounds,
    ExpandedQuery,
    SearchRequest,
    SourcedDocument,
    WebSearchRequest,
    ZeroMatchResponse,
)

__all__ = [
    "CombinedDocument",
    "DateBounds",
    "DocumentChunk",
    "ExpandedQuery",
    "QARequest",
    "QAResponse",
    "QueryFilter",
    "RangeFilter",
    "SearchRequest",
    "SourcedDocument",
    "TermsFilter",
    "WebSearchRequest",
    "ZeroMatchResponse",
]
