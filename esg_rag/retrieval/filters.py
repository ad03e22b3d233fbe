"""Build request filters and translate them into each provider's dialect."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from qdrant_client.http import models as qmodels

from esg_rag.domains import DomainConfig
from esg_rag.exceptions import InvalidFilterError
from esg_rag.models.filters import QueryFilter, RangeFilter, TermsFilter
from esg_rag.models.search import SearchRequest


def build_query_filter(
    request: SearchRequest,
    domain: DomainConfig,
    extra_clauses: Sequence[TermsFilter] = (),
) -> Optional[QueryFilter]:
    """Validate the request's filter fields against the domain and combine them."""
    clauses: List[Any] = list(extra_clauses)
    for field_name, values in (request.filter or {}).items():
        if field_name not in domain.filter_fields:
            raise InvalidFilterError(
                f"Field '{field_name}' cannot be filtered in {domain.endpoint}", field_name
            )
        if values:
            clauses.append(TermsFilter(field=field_name, values=list(values)))
    for field_name, bounds in (request.datefilter or {}).items():
        if field_name not in domain.range_fields:
            raise InvalidFilterError(
                f"Field '{field_name}' has no range filter in {domain.endpoint}", field_name
            )
        if bounds.gte is None and bounds.lte is None:
            raise InvalidFilterError(f"Range on '{field_name}' needs gte or lte", field_name)
        clauses.append(RangeFilter(field=field_name, gte=bounds.gte, lte=bounds.lte))
    return QueryFilter(clauses=clauses) if clauses else None


def to_qdrant_filter(query_filter: Optional[QueryFilter]) -> Optional[qmodels.Filter]:
    if not query_filter:
        return None
    conditions: List[qmodels.FieldCondition] = []
    for clause in query_filter.clauses:
        if isinstance(clause, TermsFilter):
            conditions.append(
                qmodels.FieldCondition(key=clause.field, match=qmodels.MatchAny(any=clause.values))
            )
        else:
            conditions.append(
                qmodels.FieldCondition(
                    key=clause.field,
                    range=qmodels.Range(gte=clause.gte, lte=clause.lte),
                )
            )
    return qmodels.Filter(must=conditions)


def to_elasticsearch_filter(query_filter: Optional[QueryFilter]) -> List[Dict[str, Any]]:
    if not query_filter:
        return []
    clauses: List[Dict[str, Any]] = []
    for clause in query_filter.clauses:
        if isinstance(clause, TermsFilter):
            clauses.append({"terms": {clause.field: list(clause.values)}})
        else:
            bounds = {
                key: value
                for key, value in (("gte", clause.gte), ("lte", clause.lte))
                if value is not None
            }
            clauses.append({"range": {clause.field: bounds}})
    return clauses


def build_fulltext_query(
    keywords: Sequence[str],
    query_filter: Optional[QueryFilter],
    text_field: str = "text",
) -> Dict[str, Any]:
    """``bool`` query matching any keyword variant, restricted by the filter."""
    bool_query: Dict[str, Any] = {
        "should": [{"match": {text_field: keyword}} for keyword in keywords],
        "minimum_should_match": 1,
    }
    filter_clauses = to_elasticsearch_filter(query_filter)
    if filter_clauses:
        bool_query["filter"] = filter_clauses
    return {"bool": bool_query}
