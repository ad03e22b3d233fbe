"""Tests for the SQL metadata store and the document/metadata join."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from esg_rag.exceptions import RecordNotFoundError
from esg_rag.models.chunk import CombinedDocument
from esg_rag.retrieval.metadata import (
    MetadataJoiner,
    MetadataQuery,
    PrefilterQuery,
    SqlMetadataStore,
)

REPORTS = MetadataQuery(table="reports", key_column="id", columns=("title", "release_date"))
STANDARDS = PrefilterQuery(
    table="standards", key_column="id", search_columns=("title", "standard_number")
)


async def seeded_store():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.execute(text("CREATE TABLE reports (id TEXT, title TEXT, release_date INTEGER)"))
        await conn.execute(
            text(
                "INSERT INTO reports VALUES "
                "('r1', 'Ocean Outlook', 1700000000), ('r2', 'Land Use', 1600000000)"
            )
        )
        await conn.execute(
            text("CREATE TABLE standards (id TEXT, title TEXT, standard_number TEXT)")
        )
        await conn.execute(
            text(
                "INSERT INTO standards VALUES "
                "('s1', 'Carbon Footprint of Products', 'ISO 14067'), "
                "('s2', 'Water Footprint', 'ISO 14046'), "
                "('s3', 'Energy_Audits 100%', 'EN 16247')"
            )
        )
    return SqlMetadataStore(engine)


def doc(doc_id):
    return CombinedDocument(doc_id=doc_id, text=doc_id)


class TestSqlMetadataStore:
    @pytest.mark.asyncio
    async def test_fetch_selects_key_and_columns(self):
        store = await seeded_store()

        rows = await store.fetch(REPORTS, ["r1", "missing"])

        assert rows == [{"id": "r1", "title": "Ocean Outlook", "release_date": 1700000000}]
        await store.close()

    @pytest.mark.asyncio
    async def test_search_ids_is_case_insensitive_substring(self):
        store = await seeded_store()

        assert await store.search_ids(STANDARDS, "FOOTPRINT") == ["s1", "s2"]
        assert await store.search_ids(STANDARDS, "14067") == ["s1"]
        assert await store.search_ids(STANDARDS, "nothing") == []
        await store.close()

    @pytest.mark.asyncio
    async def test_search_ids_escapes_wildcards(self):
        store = await seeded_store()

        assert await store.search_ids(STANDARDS, "100%") == ["s3"]
        assert await store.search_ids(STANDARDS, "y_a") == ["s3"]
        assert await store.search_ids(STANDARDS, "s_a") == []
        await store.close()


class TestMetadataJoiner:
    @pytest.mark.asyncio
    async def test_rows_follow_document_order(self):
        store = await seeded_store()

        records = await MetadataJoiner(store).join([doc("r2"), doc("r1")], REPORTS)

        assert [record["title"] for record in records] == ["Land Use", "Ocean Outlook"]
        await store.close()

    @pytest.mark.asyncio
    async def test_missing_row_raises(self):
        store = await seeded_store()

        with pytest.raises(RecordNotFoundError) as exc_info:
            await MetadataJoiner(store).join([doc("r1"), doc("r9")], REPORTS)

        assert exc_info.value.message == "Record not found"
        assert exc_info.value.details["doc_id"] == "r9"
        await store.close()

    @pytest.mark.asyncio
    async def test_batches_distinct_ids(self):
        store = MagicMock()
        store.fetch = AsyncMock(
            side_effect=lambda query, keys: [{"id": key, "title": key} for key in keys]
        )
        documents = [doc(f"r{index}") for index in range(5)] + [doc("r0")]

        records = await MetadataJoiner(store, batch_size=2).join(documents, REPORTS)

        assert [call.args[1] for call in store.fetch.await_args_list] == [
            ["r0", "r1"],
            ["r2", "r3"],
            ["r4"],
        ]
        assert len(records) == 6

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValueError):
            MetadataJoiner(MagicMock(), batch_size=0)
