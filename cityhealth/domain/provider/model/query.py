"""Backend query description for the provider collection.

Queries are built fluently and immutably, mirroring the managed database
client: equality filters, ordering, a start-after cursor and a limit. No
offset paging exists.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from cityhealth.domain.shared.error import QueryConfigurationError


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = True


@dataclass(frozen=True)
class CursorHandle:
    """Opaque reference to the last record of a page.

    Holds the record's ordering values and identity so the backend can
    resume strictly after it.
    """

    doc_id: str
    sort_values: tuple[Any, ...]


@dataclass(frozen=True)
class ProviderQuery:
    equals: tuple[tuple[str, Any], ...] = ()
    order_by: tuple[OrderBy, ...] = ()
    start_after: CursorHandle | None = None
    limit: int | None = None

    def where(self, name: str, value: Any) -> "ProviderQuery":
        return replace(self, equals=self.equals + ((name, value),))

    def order(self, name: str, descending: bool = True) -> "ProviderQuery":
        return replace(self, order_by=self.order_by + (OrderBy(name, descending),))

    def after(self, handle: CursorHandle | None) -> "ProviderQuery":
        return replace(self, start_after=handle)

    def take(self, limit: int) -> "ProviderQuery":
        return replace(self, limit=limit)

    @property
    def equality_fields(self) -> frozenset[str]:
        return frozenset(name for name, _ in self.equals)

    @property
    def order_fields(self) -> tuple[str, ...]:
        return tuple(o.field for o in self.order_by)

    def describe(self) -> dict[str, Any]:
        """Loggable summary of the query (the cursor is summarized by id)."""
        return {
            "equals": dict(self.equals),
            "order_by": [f"{o.field} {'desc' if o.descending else 'asc'}" for o in self.order_by],
            "start_after": self.start_after.doc_id if self.start_after else None,
            "limit": self.limit,
        }


def verified_providers() -> ProviderQuery:
    """Base query for publicly searchable providers."""
    return ProviderQuery().where("verified", True)


@dataclass(frozen=True)
class ProviderPage:
    documents: list[dict[str, Any]]
    last: CursorHandle | None = None

    @property
    def empty(self) -> bool:
        return not self.documents


@dataclass(frozen=True)
class CompositeIndex:
    equality: frozenset[str]
    order_by: tuple[str, ...]


@dataclass
class IndexCatalog:
    """The set of composite indexes deployed on the backend.

    Queries that a single-field index can serve (equality only, or one
    ordering with no equality filter) never need a composite index. Any
    other shape must match a declared index exactly, otherwise the backend
    refuses it.
    """

    indexes: list[CompositeIndex] = field(default_factory=list)

    def needs_composite(self, query: ProviderQuery) -> bool:
        if not query.order_by:
            return False
        if not query.equals and len(query.order_by) == 1:
            return False
        return True

    def check(self, query: ProviderQuery) -> None:
        if not self.needs_composite(query):
            return
        for index in self.indexes:
            if index.equality == query.equality_fields and index.order_by == query.order_fields:
                return
        fields = sorted(query.equality_fields) + list(query.order_fields)
        raise QueryConfigurationError(
            "The query requires a composite index that is not deployed: "
            f"equality={sorted(query.equality_fields)} order_by={list(query.order_fields)}",
            fields=fields,
        )
