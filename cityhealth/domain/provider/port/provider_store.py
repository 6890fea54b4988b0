"""ProviderStore port: the narrow interface to the managed document database."""

from abc import abstractmethod
from typing import Any, Protocol

from cityhealth.domain.provider.model.query import ProviderPage, ProviderQuery


class ProviderStore(Protocol):
    """Protocol for provider collection backends.

    Implementations raise QueryConfigurationError when a query needs a
    composite index that is not deployed, and StorageUnavailableError when
    the backend cannot be reached.
    """

    @abstractmethod
    async def query(self, query: ProviderQuery) -> ProviderPage:
        """Run a filtered, ordered, cursor-paginated query.

        Args:
            query: Equality filters, ordering, start-after cursor and limit.

        Returns:
            The matching documents (each carrying its "id") and a cursor
            handle referencing the last one.
        """
        ...

    @abstractmethod
    async def get(self, provider_id: str) -> dict[str, Any] | None:
        """Fetch one document by identity, or None if it does not exist."""
        ...

    @abstractmethod
    async def get_many(self, provider_ids: list[str]) -> list[dict[str, Any]]:
        """Fetch documents by identity, skipping missing ones, in request order."""
        ...

    @abstractmethod
    async def increment(self, provider_id: str, field: str, amount: int = 1) -> None:
        """Atomically add `amount` to a numeric field."""
        ...

    @abstractmethod
    async def update(self, provider_id: str, values: dict[str, Any]) -> None:
        """Merge `values` into an existing document."""
        ...
