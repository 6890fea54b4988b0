"""Persisted client state: small JSON values under well-known keys."""

from abc import abstractmethod
from typing import Any, Protocol

SEARCH_HISTORY_KEY = "searchHistory"
DISMISSED_SUGGESTIONS_KEY = "dismissedSuggestions"
USER_INTERACTIONS_KEY = "userInteractions"
FAVORITES_KEY = "favorites"
LANGUAGE_KEY = "language"


class LocalState(Protocol):
    """Client-side key/value persistence.

    List values are ordered lists of ``{"id", "timestamp", ...}`` entries,
    most recent first, so they can be replayed when debugging.
    """

    @abstractmethod
    def read(self, key: str) -> Any | None:
        """Return the stored value, or None if missing or unreadable."""
        ...

    @abstractmethod
    def write(self, key: str, value: Any) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...

    def read_list(self, key: str) -> list[dict[str, Any]]:
        value = self.read(key)
        return value if isinstance(value, list) else []
