from abc import abstractmethod
from typing import Protocol


class TemplateStore(Protocol):
    """Source of page markup, addressed by template path (e.g. ``pages/search.html``)."""

    @abstractmethod
    async def fetch(self, path: str) -> str:
        """Return the markup for `path`.

        Raises:
            TemplateNotFoundError: The template is missing or could not be fetched.
        """
        ...
