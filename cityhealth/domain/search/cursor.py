"""Pagination cursor store owned by the search service."""

from cityhealth.domain.provider.model.query import CursorHandle


class CursorStore:
    """Maps a search context to ``{page: handle of that page's last record}``.

    At most ``max_per_context`` cursors are kept per context; the lowest page
    is discarded first.
    """

    def __init__(self, max_per_context: int = 20) -> None:
        if max_per_context < 1:
            raise ValueError("max_per_context must be positive")
        self.max_per_context = max_per_context
        self._cursors: dict[str, dict[int, CursorHandle]] = {}

    def get(self, context_key: str, page: int) -> CursorHandle | None:
        return self._cursors.get(context_key, {}).get(page)

    def record(self, context_key: str, page: int, handle: CursorHandle) -> None:
        pages = self._cursors.setdefault(context_key, {})
        pages[page] = handle
        while len(pages) > self.max_per_context:
            del pages[min(pages)]

    def highest_before(self, context_key: str, page: int) -> tuple[int, CursorHandle] | None:
        """The known cursor with the greatest page number below `page`."""
        pages = self._cursors.get(context_key, {})
        known = [p for p in pages if p < page]
        if not known:
            return None
        best = max(known)
        return best, pages[best]

    def pages(self, context_key: str) -> list[int]:
        return sorted(self._cursors.get(context_key, {}))

    def reset(self, context_key: str | None = None) -> None:
        if context_key is None:
            self._cursors.clear()
        else:
            self._cursors.pop(context_key, None)
