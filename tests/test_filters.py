"""Tests for filter validation and provider translation."""

import pytest
from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models as qmodels

from esg_rag.domains import DOMAINS
from esg_rag.exceptions import InvalidFilterError
from esg_rag.models.filters import QueryFilter, RangeFilter, TermsFilter
from esg_rag.models.search import SearchRequest
from esg_rag.retrieval.filters import (
    build_fulltext_query,
    build_query_filter,
    to_elasticsearch_filter,
    to_qdrant_filter,
)
from esg_rag.retrieval.vector_store import QdrantVectorStore


class TestBuildQueryFilter:
    def test_no_filter(self):
        assert build_query_filter(SearchRequest(query="q"), DOMAINS["esg"]) is None

    def test_terms_and_range(self):
        request = SearchRequest(
            query="q",
            filter={"journal": ["JIE"]},
            datefilter={"date": {"gte": 1600000000}},
        )

        query_filter = build_query_filter(request, DOMAINS["sci"])

        assert query_filter.clauses == [
            TermsFilter(field="journal", values=["JIE"]),
            RangeFilter(field="date", gte=1600000000),
        ]

    def test_disallowed_field(self):
        request = SearchRequest(query="q", filter={"country": ["CN"]})

        with pytest.raises(InvalidFilterError) as exc_info:
            build_query_filter(request, DOMAINS["esg"])

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"field": "country"}

    def test_range_needs_a_bound(self):
        request = SearchRequest(query="q", datefilter={"date": {}})

        with pytest.raises(InvalidFilterError):
            build_query_filter(request, DOMAINS["sci"])

    def test_empty_values_are_ignored(self):
        request = SearchRequest(query="q", filter={"rec_id": []})

        assert build_query_filter(request, DOMAINS["esg"]) is None

    def test_extra_clauses_come_first(self):
        request = SearchRequest(query="q", filter={"organization": ["ISO"]})
        extra = TermsFilter(field="rec_id", values=["s1"])

        query_filter = build_query_filter(request, DOMAINS["standard"], [extra])

        assert query_filter.clauses[0] == extra
        assert len(query_filter.clauses) == 2


class TestTranslation:
    def test_elasticsearch_clauses(self):
        query_filter = QueryFilter(
            clauses=[
                TermsFilter(field="rec_id", values=["a", "b"]),
                RangeFilter(field="publish_date", lte=1700000000),
            ]
        )

        assert to_elasticsearch_filter(query_filter) == [
            {"terms": {"rec_id": ["a", "b"]}},
            {"range": {"publish_date": {"lte": 1700000000}}},
        ]

    def test_qdrant_conditions(self):
        query_filter = QueryFilter(clauses=[TermsFilter(field="rec_id", values=["a", "b"])])

        translated = to_qdrant_filter(query_filter)

        (condition,) = translated.must
        assert condition.key == "rec_id"
        assert condition.match.any == ["a", "b"]

    def test_empty_filter_translates_to_nothing(self):
        assert to_qdrant_filter(None) is None
        assert to_elasticsearch_filter(QueryFilter()) == []

    def test_fulltext_query_shape(self):
        query = build_fulltext_query(["forest", "森林"], None)

        assert query == {
            "bool": {
                "should": [{"match": {"text": "forest"}}, {"match": {"text": "森林"}}],
                "minimum_should_match": 1,
            }
        }

    def test_fulltext_query_with_filter(self):
        query_filter = QueryFilter(clauses=[TermsFilter(field="rec_id", values=["a"])])

        query = build_fulltext_query(["forest"], query_filter, text_field="abstract")

        assert query["bool"]["should"] == [{"match": {"abstract": "forest"}}]
        assert query["bool"]["filter"] == [{"terms": {"rec_id": ["a"]}}]


class TestQdrantFilterSemantics:
    @pytest.mark.asyncio
    async def test_terms_filter_rejects_other_values(self):
        client = AsyncQdrantClient(location=":memory:")
        await client.create_collection(
            "esg",
            vectors_config=qmodels.VectorParams(size=2, distance=qmodels.Distance.COSINE),
        )
        await client.upsert(
            "esg",
            points=[
                qmodels.PointStruct(
                    id=index,
                    vector=[1.0, float(index)],
                    payload={"chunk_id": f"{value}_0", "rec_id": value, "text": value},
                )
                for index, value in enumerate(["a", "b", "c"], start=1)
            ],
        )
        store = QdrantVectorStore(client)
        query_filter = QueryFilter(clauses=[TermsFilter(field="rec_id", values=["a", "b"])])

        points = await store.query("esg", [1.0, 1.0], 10, query_filter)

        assert sorted(point.payload["rec_id"] for point in points) == ["a", "b"]
        await store.close()
