"""
Shared fixtures for the retrieval and API test suites.

Provides: provider hit builders, AsyncMock-backed stores, a wired pipeline
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from esg_rag.models.search import ExpandedQuery
from esg_rag.retrieval.pipeline import HybridSearchPipeline


def vector_hit(chunk_id, point_id=1, **payload):
    """Qdrant-style scored point carrying ``chunk_id`` in its payload."""
    return SimpleNamespace(id=point_id, score=0.9, payload={"chunk_id": chunk_id, **payload})


def fulltext_hit(chunk_id, **source):
    """Elasticsearch-style search hit."""
    return {"_id": chunk_id, "_index": "test", "_source": dict(source)}


def mget_doc(chunk_id, found=True, **source):
    doc = {"_id": chunk_id, "_index": "test", "found": found}
    if found:
        doc["_source"] = dict(source)
    return doc


@pytest.fixture
def expanded_query():
    return ExpandedQuery(
        semantic_query="deforestation",
        fulltext_query_eng=["deforestation", "forest loss"],
        fulltext_query_chi_sim=["毁林"],
        fulltext_query_chi_tra=["毀林"],
    )


@pytest.fixture
def query_generator(expanded_query):
    generator = MagicMock()
    generator.generate = AsyncMock(return_value=expanded_query)
    return generator


@pytest.fixture
def embedder():
    fake = MagicMock()
    fake.embed = AsyncMock(return_value=[0.1, 0.2, 0.3])
    return fake


@pytest.fixture
def vector_store():
    store = MagicMock()
    store.query = AsyncMock(return_value=[])
    return store


@pytest.fixture
def fulltext_store():
    store = MagicMock()
    store.search = AsyncMock(return_value=[])
    store.get_many = AsyncMock(return_value=[])
    store.index_document = AsyncMock()
    return store


@pytest.fixture
def metadata_store():
    store = MagicMock()
    store.fetch = AsyncMock(return_value=[])
    store.search_ids = AsyncMock(return_value=[])
    return store


@pytest.fixture
def pipeline(query_generator, embedder, vector_store, fulltext_store, metadata_store):
    return HybridSearchPipeline(
        query_generator=query_generator,
        embedder=embedder,
        vector_store=vector_store,
        fulltext_store=fulltext_store,
        metadata_store=metadata_store,
    )
