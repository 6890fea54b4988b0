"""SearchService - cached, cursor-paginated provider search."""

import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import field
from typing import Any

import logfire

from cityhealth.config import SearchConfig
from cityhealth.domain.provider.model.query import (
    CursorHandle,
    ProviderQuery,
    verified_providers,
)
from cityhealth.domain.provider.model.record import project
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.search.cache import ResultCache
from cityhealth.domain.search.cursor import CursorStore
from cityhealth.domain.search.model.value import (
    HistoryEntry,
    SearchFlag,
    SearchRequest,
    SearchResult,
)
from cityhealth.domain.search.util.relevance import filter_and_rank
from cityhealth.domain.shared.error import CursorNotAvailableError, QueryConfigurationError
from cityhealth.domain.shared.port.local_state import SEARCH_HISTORY_KEY, LocalState
from cityhealth.domain.shared.service import Service

logger = logging.getLogger(__name__)

EMERGENCY_LIMIT = 10


class _Exhausted(Exception):
    """The results ended before the requested page."""


class SearchService(Service):
    """Query executor over the provider store.

    Owns the result cache and the cursor store. Pages beyond the first start
    after the cursor recorded for the previous page of the same context; a
    missing cursor is resolved by walking forward from the highest known one
    (or raises CursorNotAvailableError when that is disabled).
    """

    store: ProviderStore
    cache: ResultCache
    cursors: CursorStore
    state: LocalState
    config: SearchConfig
    wall_clock: Callable[[], float] = time.time
    _background: set[asyncio.Task] = field(default_factory=set, init=False, repr=False)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def build_query(self, request: SearchRequest, start_after: CursorHandle | None) -> ProviderQuery:
        query = verified_providers()
        if request.service_type is not None:
            query = query.where("type", request.service_type.value)
        if request.location is not None:
            query = query.where("city", request.location)
        for flag in SearchFlag:
            if flag in request.filters:
                query = query.where(flag.value, True)
        return query.order("rating").after(start_after).take(self.config.page_size)

    async def search(self, request: SearchRequest) -> SearchResult:
        key = request.serialize()
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Search cache hit: %s", key)
            return cached

        with logfire.span("SearchProviders"):
            started = time.perf_counter()
            try:
                result = await self._execute(request)
            except QueryConfigurationError as e:
                logger.error(
                    "Search rejected by backend (missing index %s): params=%s",
                    e.fields,
                    request.log_params(),
                )
                raise
            result.query_time_ms = round((time.perf_counter() - started) * 1000, 3)

        self.cache.put(key, result)
        return result

    async def _execute(self, request: SearchRequest) -> SearchResult:
        context = request.context_key()
        page_size = self.config.page_size

        start_after = None
        if request.page > 1:
            try:
                start_after = await self._cursor_before(request)
            except _Exhausted:
                logger.debug("No results reach page %d: %s", request.page, context)
                return SearchResult.empty(request.page, page_size)

        page = await self.store.query(self.build_query(request, start_after))
        if page.last is not None:
            self.cursors.record(context, request.page, page.last)

        documents = page.documents
        if request.query:
            documents = filter_and_rank(documents, request.query)
        fields = list(request.fields) if request.fields is not None else None
        providers = [project(doc, fields) for doc in documents]

        return SearchResult(
            providers=providers,
            total=len(providers),
            page=request.page,
            page_size=page_size,
            has_more=len(page.documents) == page_size,
        )

    async def _cursor_before(self, request: SearchRequest) -> CursorHandle:
        context = request.context_key()
        target = request.page - 1
        handle = self.cursors.get(context, target)
        if handle is not None:
            return handle

        if not self.config.resolve_missing_cursors:
            raise CursorNotAvailableError(context, request.page)

        known = self.cursors.highest_before(context, target)
        page, handle = known if known is not None else (0, None)
        logger.info("Resolving cursors for pages %d-%d: %s", page + 1, target, context)

        while True:
            page += 1
            fetched = await self.store.query(self.build_query(request, handle))
            if fetched.last is None:
                raise _Exhausted()
            self.cursors.record(context, page, fetched.last)
            if page == target:
                return fetched.last
            if len(fetched.documents) < self.config.page_size:
                raise _Exhausted()
            handle = fetched.last

    def prefetch_next_page(self, request: SearchRequest) -> asyncio.Task:
        """Warm the cache with the following page in the background."""
        next_request = request.for_page(request.page + 1)
        task = asyncio.create_task(self.search(next_request))
        self._background.add(task)
        task.add_done_callback(self._prefetch_done)
        return task

    def _prefetch_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Prefetch failed: %s", error)

    def reset_pagination(self, request: SearchRequest | None = None) -> None:
        self.cursors.reset(request.context_key() if request else None)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def popular(self, limit: int = 10, fields: list[str] | None = None) -> list[dict[str, Any]]:
        """Top verified providers by rating, then view count."""
        key = f"popular:{limit}:{','.join(fields) if fields else 'all'}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        query = verified_providers().order("rating").order("view_count").take(limit)
        page = await self.store.query(query)
        providers = [project(doc, fields) for doc in page.documents]
        self.cache.put(key, providers)
        return providers

    async def emergency(self, limit: int = EMERGENCY_LIMIT) -> list[dict[str, Any]]:
        """Verified providers available around the clock, best rated first."""
        query = verified_providers().where("available_24_7", True).order("rating").take(limit)
        page = await self.store.query(query)
        return page.documents

    async def get_many(
        self, provider_ids: list[str], fields: list[str] | None = None
    ) -> list[dict[str, Any]]:
        documents = await self.store.get_many(provider_ids)
        return [project(doc, fields) for doc in documents]

    async def service_types(self) -> list[str]:
        page = await self.store.query(verified_providers())
        return sorted({doc["type"] for doc in page.documents if doc.get("type")})

    async def cities(self) -> list[str]:
        page = await self.store.query(verified_providers())
        return sorted({doc["city"] for doc in page.documents if doc.get("city")})

    # ------------------------------------------------------------------
    # Search history
    # ------------------------------------------------------------------

    def save_history(self, request: SearchRequest) -> HistoryEntry:
        entry = HistoryEntry(
            id=uuid.uuid4().hex,
            service_type=request.service_type.value if request.service_type else None,
            location=request.location,
            query=request.query,
            timestamp=self.wall_clock(),
        )
        entries = self.state.read_list(SEARCH_HISTORY_KEY)
        entries.insert(0, entry.model_dump())
        self.state.write(SEARCH_HISTORY_KEY, entries[: self.config.history_limit])
        return entry

    def remember(self, request: SearchRequest) -> HistoryEntry | None:
        """Save a first-page search that has criteria; browsing everything is not history."""
        if request.page != 1 or not (request.query or request.service_type or request.location):
            return None
        return self.save_history(request)

    def history(self) -> list[HistoryEntry]:
        entries = []
        for raw in self.state.read_list(SEARCH_HISTORY_KEY):
            try:
                entries.append(HistoryEntry.model_validate(raw))
            except ValueError:
                logger.warning("Skipping malformed search history entry: %r", raw)
        return entries

    def clear_history(self) -> None:
        self.state.remove(SEARCH_HISTORY_KEY)
