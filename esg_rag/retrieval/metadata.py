"""Relational metadata lookups and the document/metadata join."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from sqlalchemy import column, func, or_, select, table
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from esg_rag.exceptions import RecordNotFoundError
from esg_rag.models.chunk import CombinedDocument

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 400


@dataclass(frozen=True)
class MetadataQuery:
    """Columns to read from ``table`` for a set of document keys."""

    table: str
    key_column: str
    columns: Tuple[str, ...]

    @property
    def selected_columns(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys((self.key_column, *self.columns)))


@dataclass(frozen=True)
class PrefilterQuery:
    """Substring search over ``search_columns`` returning matching keys."""

    table: str
    key_column: str
    search_columns: Tuple[str, ...]
    limit: int = 1000


def _like_pattern(text: str) -> str:
    escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SqlMetadataStore:
    """SQLAlchemy async access to the metadata tables."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    @classmethod
    def from_url(cls, url: str) -> "SqlMetadataStore":
        return cls(create_async_engine(url, pool_pre_ping=True))

    async def fetch(self, query: MetadataQuery, keys: Sequence[str]) -> List[Dict[str, Any]]:
        source = table(query.table, *(column(name) for name in query.selected_columns))
        statement = select(*source.c).where(source.c[query.key_column].in_(list(keys)))
        async with self.engine.connect() as connection:
            result = await connection.execute(statement)
            return [dict(row) for row in result.mappings()]

    async def search_ids(self, prefilter: PrefilterQuery, text: str) -> List[str]:
        columns = {prefilter.key_column, *prefilter.search_columns}
        source = table(prefilter.table, *(column(name) for name in columns))
        pattern = _like_pattern(text)
        statement = (
            select(source.c[prefilter.key_column])
            .where(
                or_(
                    *(
                        func.lower(source.c[name]).like(pattern, escape="\\")
                        for name in prefilter.search_columns
                    )
                )
            )
            .limit(prefilter.limit)
        )
        async with self.engine.connect() as connection:
            result = await connection.execute(statement)
            return [str(value) for value in result.scalars()]

    async def close(self) -> None:
        await self.engine.dispose()


class MetadataJoiner:
    """Resolves descriptive rows for combined documents in bounded batches."""

    def __init__(self, store: SqlMetadataStore, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.store = store
        self.batch_size = batch_size

    async def join(
        self,
        documents: Sequence[CombinedDocument],
        query: MetadataQuery,
    ) -> List[Dict[str, Any]]:
        """Return one metadata row per document, in document order.

        Raises :class:`RecordNotFoundError` when any document has no row.
        """
        doc_ids = list(dict.fromkeys(document.doc_id for document in documents))
        lookup: Dict[str, Dict[str, Any]] = {}
        for start in range(0, len(doc_ids), self.batch_size):
            batch = doc_ids[start : start + self.batch_size]
            rows = await self.store.fetch(query, batch)
            for row in rows:
                lookup[str(row[query.key_column])] = row
        logger.debug("Joined %d/%d documents against %s", len(lookup), len(doc_ids), query.table)

        records: List[Dict[str, Any]] = []
        for document in documents:
            row = lookup.get(document.doc_id)
            if row is None:
                raise RecordNotFoundError(document.doc_id, query.table)
            records.append(row)
        return records
