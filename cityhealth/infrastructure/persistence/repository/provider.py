"""SQLAlchemy implementation of the ProviderStore port."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import and_, insert, or_, select, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cityhealth.domain.provider.model.query import (
    CursorHandle,
    IndexCatalog,
    ProviderPage,
    ProviderQuery,
)
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.shared.error import (
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from cityhealth.infrastructure.persistence.tables import COLUMN_FIELDS, providers_table

logger = logging.getLogger(__name__)


def _document_to_row(document: dict[str, Any]) -> dict[str, Any]:
    row: dict[str, Any] = {"id": str(document["id"])}
    for name in COLUMN_FIELDS:
        if name in document:
            row[name] = document[name]
    row["document"] = {
        k: v for k, v in document.items() if k != "id" and k not in COLUMN_FIELDS
    }
    return row


def _row_to_document(row: dict[str, Any]) -> dict[str, Any]:
    document = dict(row["document"] or {})
    for name in COLUMN_FIELDS:
        document[name] = row[name]
    document["id"] = row["id"]
    return document


def _column(name: str):
    if name != "id" and name not in COLUMN_FIELDS:
        raise ValidationError(f"Field is not queryable: {name}", field=name)
    return providers_table.c[name]


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Raise database driver failures as StorageUnavailableError, logging the detail."""
    try:
        yield
    except DBAPIError as e:
        logger.warning("Provider %s failed: %s", operation, e.orig)
        raise StorageUnavailableError(f"Provider {operation} failed") from e


def _start_after_clause(query: ProviderQuery, handle: CursorHandle):
    """Keyset condition selecting rows strictly after `handle` in query order."""
    terms = []
    for i, order in enumerate(query.order_by):
        prefix = [_column(o.field) == handle.sort_values[j] for j, o in enumerate(query.order_by[:i])]
        column = _column(order.field)
        beyond = column < handle.sort_values[i] if order.descending else column > handle.sort_values[i]
        terms.append(and_(*prefix, beyond))
    ties = [_column(o.field) == handle.sort_values[j] for j, o in enumerate(query.order_by)]
    terms.append(and_(*ties, providers_table.c.id > handle.doc_id))
    return or_(*terms)


class SqlProviderStore(ProviderStore):
    """Provider collection in a relational database, queried with keyset pagination."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        indexes: IndexCatalog | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._indexes = indexes

    async def query(self, query: ProviderQuery) -> ProviderPage:
        if self._indexes is not None:
            self._indexes.check(query)

        stmt = select(providers_table)
        for name, value in query.equals:
            stmt = stmt.where(_column(name) == value)
        if query.start_after is not None:
            stmt = stmt.where(_start_after_clause(query, query.start_after))
        for order in query.order_by:
            column = _column(order.field)
            stmt = stmt.order_by(column.desc() if order.descending else column.asc())
        stmt = stmt.order_by(providers_table.c.id.asc())
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        with _storage_errors("query"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = [dict(r) for r in result.mappings().all()]

        documents = [_row_to_document(row) for row in rows]
        last = None
        if documents:
            tail = documents[-1]
            last = CursorHandle(
                doc_id=tail["id"],
                sort_values=tuple(tail.get(o.field) for o in query.order_by),
            )
        return ProviderPage(documents=documents, last=last)

    async def get(self, provider_id: str) -> dict[str, Any] | None:
        stmt = select(providers_table).where(providers_table.c.id == provider_id)
        with _storage_errors("lookup"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                row = result.mappings().first()
        return _row_to_document(dict(row)) if row else None

    async def get_many(self, provider_ids: list[str]) -> list[dict[str, Any]]:
        if not provider_ids:
            return []
        stmt = select(providers_table).where(providers_table.c.id.in_(provider_ids))
        with _storage_errors("lookup"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                by_id = {row["id"]: _row_to_document(dict(row)) for row in result.mappings().all()}
        return [by_id[pid] for pid in provider_ids if pid in by_id]

    async def increment(self, provider_id: str, field: str, amount: int = 1) -> None:
        column = _column(field)
        stmt = (
            update(providers_table)
            .where(providers_table.c.id == provider_id)
            .values({field: column + amount})
        )
        with _storage_errors("increment"):
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError(f"Provider not found: {provider_id}")

    async def update(self, provider_id: str, values: dict[str, Any]) -> None:
        with _storage_errors("update"):
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        select(providers_table).where(providers_table.c.id == provider_id)
                    )
                    row = result.mappings().first()
                    if row is None:
                        raise NotFoundError(f"Provider not found: {provider_id}")
                    merged = _row_to_document(dict(row))
                    merged.update(values)
                    new_row = _document_to_row(merged)
                    await session.execute(
                        update(providers_table)
                        .where(providers_table.c.id == provider_id)
                        .values({k: v for k, v in new_row.items() if k != "id"})
                    )

    async def save(self, document: dict[str, Any]) -> None:
        """Insert or replace a provider document (seeding and admin tooling)."""
        row = _document_to_row(document)
        with _storage_errors("save"):
            async with self._session_factory() as session:
                async with session.begin():
                    existing = await session.execute(
                        select(providers_table.c.id).where(providers_table.c.id == row["id"])
                    )
                    if existing.first() is None:
                        await session.execute(insert(providers_table).values(**row))
                    else:
                        await session.execute(
                            update(providers_table)
                            .where(providers_table.c.id == row["id"])
                            .values({k: v for k, v in row.items() if k != "id"})
                        )
        logger.debug("Saved provider %s", row["id"])
