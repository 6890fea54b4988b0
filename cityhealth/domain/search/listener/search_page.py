"""SearchPage - runs the search described by the /search URL when that page is shown."""

import logging
from dataclasses import field
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cityhealth.domain.i18n.service.messages import GENERIC_ERROR_KEY, error_message_key
from cityhealth.domain.i18n.service.translator import Translator
from cityhealth.domain.navigation.event.page_ready import PageReady
from cityhealth.domain.search.model.value import SearchFlag, SearchRequest, SearchResult
from cityhealth.domain.search.service.search import SearchService
from cityhealth.domain.shared.error import CityHealthError
from cityhealth.domain.shared.event import EventListener

logger = logging.getLogger(__name__)

SEARCH_PATTERN = "/search"
_FLAGS = frozenset(flag.value for flag in SearchFlag)


class SearchView(BaseModel):
    """What the search page shows: results, or a localized message."""

    request: SearchRequest | None = None
    result: SearchResult | None = None
    message_key: str | None = None
    message: str | None = None

    @property
    def empty(self) -> bool:
        return self.result is not None and not self.result.providers


def request_from_query(query: dict[str, str]) -> SearchRequest:
    """Build a request from URL query parameters (``?q=&type=&location=&filters=&page=``)."""
    filters = [f for f in query.get("filters", "").split(",") if f]
    data: dict[str, Any] = {
        "query": query.get("q", ""),
        "service_type": query.get("type") or None,
        "location": query.get("location") or None,
        "filters": [f for f in filters if f in _FLAGS],
        "page": query.get("page") or 1,
    }
    if query.get("fields"):
        data["fields"] = query["fields"].split(",")
    return SearchRequest.model_validate(data)


class SearchPage(EventListener[PageReady]):
    search: SearchService
    translator: Translator
    view: SearchView | None = field(default=None, init=False)

    async def handle(self, event: PageReady) -> None:
        if event.pattern != SEARCH_PATTERN:
            return
        self.view = await self.run(event.query)

    async def run(self, query: dict[str, str]) -> SearchView:
        try:
            request = request_from_query(query)
        except PydanticValidationError:
            logger.info("Rejected search parameters: %s", query)
            return self._message("errors.invalidInput")

        try:
            result = await self.search.search(request)
        except CityHealthError as e:
            logger.warning("Search failed (%s): params=%s", e.code, request.log_params())
            return self._message(error_message_key(e), request)
        except Exception:
            logger.exception("Unexpected search failure: params=%s", request.log_params())
            return self._message(GENERIC_ERROR_KEY, request)

        self.search.remember(request)
        if result.has_more:
            self.search.prefetch_next_page(request)

        if not result.providers:
            return SearchView(
                request=request,
                result=result,
                message_key="search.noResults",
                message=self.translator.t("search.noResults"),
            )
        return SearchView(request=request, result=result)

    def _message(self, key: str, request: SearchRequest | None = None) -> SearchView:
        return SearchView(request=request, message_key=key, message=self.translator.t(key))
