"""Tests for best-effort usage logging."""

import pytest

from esg_rag.api.usage_log import UsageLogger


class TestUsageLogger:
    @pytest.mark.asyncio
    async def test_indexes_one_document(self, fulltext_store):
        logger = UsageLogger(fulltext_store, index="function_log")

        await logger.record("a@b.com", "esg_search", top_k=5, ext_k=1, invoked_at=1700000000000)

        fulltext_store.index_document.assert_awaited_once_with(
            "function_log",
            {
                "email": "a@b.com",
                "invoked_at": 1700000000000,
                "service_type": "esg_search",
                "top_k": 5,
                "ext_k": 1,
            },
        )

    @pytest.mark.asyncio
    async def test_defaults_timestamp_to_now(self, fulltext_store):
        await UsageLogger(fulltext_store).record("a@b.com", "rag")

        document = fulltext_store.index_document.await_args.args[1]
        assert document["invoked_at"] > 1700000000000

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self, fulltext_store, caplog):
        fulltext_store.index_document.side_effect = ConnectionError("cluster down")

        await UsageLogger(fulltext_store).record("a@b.com", "esg_search")

        assert "cluster down" in caplog.text
