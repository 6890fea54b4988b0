"""Tests for the SearchPage listener."""

import pytest

from cityhealth.config import SearchConfig
from cityhealth.domain.navigation.event.page_ready import PageReady
from cityhealth.domain.provider.model.query import IndexCatalog
from cityhealth.domain.search.cache import ResultCache
from cityhealth.domain.search.cursor import CursorStore
from cityhealth.domain.search.listener.search_page import SearchPage, request_from_query
from cityhealth.domain.search.service.search import SearchService
from cityhealth.infrastructure.persistence.memory_store import InMemoryProviderStore
from conftest import provider_doc


def page_ready(query: dict[str, str], pattern: str = "/search") -> PageReady:
    return PageReady(path=pattern, pattern=pattern, query=query)


@pytest.fixture
def store() -> InMemoryProviderStore:
    return InMemoryProviderStore(
        [
            provider_doc("a", type="clinic", city="Oran"),
            provider_doc("b", type="lab", city="Oran"),
        ]
    )


@pytest.fixture
def search_page(store, state, clock, translator) -> SearchPage:
    service = SearchService(
        store=store,
        cache=ResultCache(clock=clock),
        cursors=CursorStore(),
        state=state,
        config=SearchConfig(),
        wall_clock=clock,
    )
    return SearchPage(search=service, translator=translator)


class TestRequestFromQuery:
    def test_parses_url_parameters(self):
        request = request_from_query(
            {"q": "cardio", "type": "doctor", "filters": "home_visits,parking", "page": "2"}
        )

        assert request.query == "cardio"
        assert request.service_type == "doctor"
        assert [f.value for f in request.filters] == ["home_visits"]
        assert request.page == 2

    def test_fields_are_split(self):
        assert request_from_query({"fields": "name,rating"}).fields == ("name", "rating")


class TestSearchPage:
    @pytest.mark.asyncio
    async def test_ignores_other_pages(self, search_page):
        await search_page.handle(page_ready({}, pattern="/"))

        assert search_page.view is None

    @pytest.mark.asyncio
    async def test_runs_search_and_saves_history(self, search_page):
        await search_page.handle(page_ready({"type": "clinic", "location": "Oran"}))

        view = search_page.view
        assert [p["id"] for p in view.result.providers] == ["a"]
        assert view.message is None
        assert [h.service_type for h in search_page.search.history()] == ["clinic"]

    @pytest.mark.asyncio
    async def test_unfiltered_search_is_not_saved(self, search_page):
        await search_page.handle(page_ready({}))

        assert search_page.search.history() == []

    @pytest.mark.asyncio
    async def test_empty_result_shows_message(self, search_page, translator):
        await search_page.handle(page_ready({"type": "pharmacy"}))

        view = search_page.view
        assert view.empty
        assert view.message_key == "search.noResults"
        assert view.message == translator.t("search.noResults")

    @pytest.mark.asyncio
    async def test_invalid_parameters_show_message(self, search_page):
        await search_page.handle(page_ready({"type": "veterinarian"}))

        assert search_page.view.message_key == "errors.invalidInput"
        assert search_page.view.result is None

    @pytest.mark.asyncio
    async def test_missing_index_shows_localized_message(self, state, clock, translator):
        store = InMemoryProviderStore([provider_doc("a")], indexes=IndexCatalog([]))
        service = SearchService(
            store=store,
            cache=ResultCache(clock=clock),
            cursors=CursorStore(),
            state=state,
            config=SearchConfig(),
        )
        page = SearchPage(search=service, translator=translator)

        await page.handle(page_ready({"type": "clinic"}))

        assert page.view.message_key == "errors.searchUnavailable"
        assert page.view.message == translator.t("errors.searchUnavailable")
        assert "index" not in page.view.message.lower()

    @pytest.mark.asyncio
    async def test_storage_failure_shows_network_message(self, search_page, store):
        store.available = False

        await search_page.handle(page_ready({"type": "clinic"}))

        assert search_page.view.message_key == "errors.network"
