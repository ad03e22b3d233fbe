"""Best-effort usage records for billing and analytics."""

from __future__ import annotations

import logging
import time
from typing import Optional

from esg_rag.retrieval.fulltext_store import ElasticsearchFulltextStore

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class UsageLogger:
    """Writes one document per successful call into the usage index."""

    def __init__(self, store: ElasticsearchFulltextStore, index: str = "function_log") -> None:
        self.store = store
        self.index = index

    async def record(
        self,
        email: str,
        service_type: str,
        top_k: int = 0,
        ext_k: int = 0,
        invoked_at: Optional[int] = None,
    ) -> None:
        document = {
            "email": email,
            "invoked_at": invoked_at if invoked_at is not None else now_ms(),
            "service_type": service_type,
            "top_k": top_k,
            "ext_k": ext_k,
        }
        try:
            await self.store.index_document(self.index, document)
        except Exception as exc:
            logger.warning("Error inserting usage log for %s: %s", service_type, exc)
