"""In-memory ProviderStore with the managed database's query semantics.

Used in demo mode (no database configured) and as the test double for the
search and suggestion services.
"""

import asyncio
import copy
import logging
from functools import cmp_to_key
from typing import Any

from cityhealth.domain.provider.model.query import (
    CursorHandle,
    IndexCatalog,
    OrderBy,
    ProviderPage,
    ProviderQuery,
)
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.shared.error import NotFoundError, StorageUnavailableError

logger = logging.getLogger(__name__)


def _compare_values(a: Any, b: Any) -> int:
    # None sorts before everything, as in the managed backend
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def _compare_keys(order_by: tuple[OrderBy, ...], a: tuple[Any, ...], b: tuple[Any, ...]) -> int:
    """Compare (sort values..., doc id) keys; the id breaks ties ascending."""
    for i, order in enumerate(order_by):
        result = _compare_values(a[i], b[i])
        if result:
            return -result if order.descending else result
    return _compare_values(a[-1], b[-1])


class InMemoryProviderStore(ProviderStore):
    """Dictionary-backed provider collection.

    Documents missing an ordering field are excluded from ordered queries.
    An IndexCatalog, when given, rejects queries that need an undeployed
    composite index.
    """

    def __init__(
        self,
        documents: list[dict[str, Any]] | None = None,
        indexes: IndexCatalog | None = None,
    ) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._indexes = indexes
        self._lock = asyncio.Lock()
        self.available = True
        self.queries: list[ProviderQuery] = []
        for document in documents or []:
            self.put(document)

    def put(self, document: dict[str, Any]) -> None:
        if "id" not in document:
            raise ValueError("Provider documents must carry an 'id'")
        self._documents[str(document["id"])] = copy.deepcopy(document)

    def __len__(self) -> int:
        return len(self._documents)

    def _ensure_available(self) -> None:
        if not self.available:
            raise StorageUnavailableError("Provider store is unreachable")

    async def query(self, query: ProviderQuery) -> ProviderPage:
        self._ensure_available()
        if self._indexes is not None:
            self._indexes.check(query)
        self.queries.append(query)

        matches = [
            doc
            for doc in self._documents.values()
            if all(doc.get(name) == value for name, value in query.equals)
            and all(o.field in doc for o in query.order_by)
        ]

        def key_of(doc: dict[str, Any]) -> tuple[Any, ...]:
            return tuple(doc.get(o.field) for o in query.order_by) + (str(doc["id"]),)

        compare = cmp_to_key(lambda a, b: _compare_keys(query.order_by, key_of(a), key_of(b)))
        matches.sort(key=compare)

        if query.start_after is not None:
            handle_key = query.start_after.sort_values + (query.start_after.doc_id,)
            matches = [
                doc for doc in matches if _compare_keys(query.order_by, key_of(doc), handle_key) > 0
            ]

        if query.limit is not None:
            matches = matches[: query.limit]

        documents = [copy.deepcopy(doc) for doc in matches]
        last = None
        if documents:
            tail = documents[-1]
            last = CursorHandle(
                doc_id=str(tail["id"]),
                sort_values=tuple(tail.get(o.field) for o in query.order_by),
            )
        return ProviderPage(documents=documents, last=last)

    async def get(self, provider_id: str) -> dict[str, Any] | None:
        self._ensure_available()
        document = self._documents.get(provider_id)
        return copy.deepcopy(document) if document is not None else None

    async def get_many(self, provider_ids: list[str]) -> list[dict[str, Any]]:
        self._ensure_available()
        return [
            copy.deepcopy(self._documents[pid]) for pid in provider_ids if pid in self._documents
        ]

    async def increment(self, provider_id: str, field: str, amount: int = 1) -> None:
        self._ensure_available()
        async with self._lock:
            document = self._documents.get(provider_id)
            if document is None:
                raise NotFoundError(f"Provider not found: {provider_id}")
            document[field] = (document.get(field) or 0) + amount

    async def update(self, provider_id: str, values: dict[str, Any]) -> None:
        self._ensure_available()
        async with self._lock:
            document = self._documents.get(provider_id)
            if document is None:
                raise NotFoundError(f"Provider not found: {provider_id}")
            document.update(copy.deepcopy(values))
