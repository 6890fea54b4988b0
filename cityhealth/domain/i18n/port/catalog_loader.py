from abc import abstractmethod
from typing import Any, Protocol


class CatalogLoader(Protocol):
    """Source of translation dictionaries, one nested JSON object per language."""

    @abstractmethod
    async def load(self, language: str) -> dict[str, Any]:
        """Return the dictionary for `language`.

        Raises:
            NotFoundError: No dictionary exists for the language.
            ExternalServiceError: The dictionary could not be fetched or parsed.
        """
        ...
