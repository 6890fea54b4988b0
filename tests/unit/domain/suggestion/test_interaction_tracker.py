"""Tests for the listeners that feed the interaction log and the suggestions panel."""

import pytest

from cityhealth.config import SearchConfig, SuggestionsConfig
from cityhealth.domain.navigation.event.page_ready import PageReady
from cityhealth.domain.provider.event.favorite_toggled import FavoriteToggled
from cityhealth.domain.provider.event.provider_viewed import ProviderViewed
from cityhealth.domain.search.cache import ResultCache
from cityhealth.domain.search.cursor import CursorStore
from cityhealth.domain.search.service.search import SearchService
from cityhealth.domain.suggestion.listener.interaction_tracker import (
    TrackFavorite,
    TrackProviderView,
)
from cityhealth.domain.suggestion.listener.suggestions_panel import SuggestionsPanel
from cityhealth.domain.suggestion.model.value import InteractionKind, Reason
from cityhealth.domain.suggestion.service.suggestion import SuggestionService
from cityhealth.infrastructure.persistence.memory_store import InMemoryProviderStore
from conftest import provider_doc


@pytest.fixture
def suggestions(state, clock) -> SuggestionService:
    store = InMemoryProviderStore(
        [provider_doc("near", city="Oran", rating=1.0), provider_doc("far", city="Tlemcen")]
    )
    search = SearchService(
        store=store,
        cache=ResultCache(clock=clock),
        cursors=CursorStore(),
        state=state,
        config=SearchConfig(),
    )
    return SuggestionService(
        store=store,
        search=search,
        state=state,
        config=SuggestionsConfig(popular_limit=0),
        wall_clock=clock,
    )


class TestTrackers:
    def test_listeners_declare_their_events(self):
        assert TrackProviderView.__event_type__ is ProviderViewed
        assert TrackFavorite.__event_type__ is FavoriteToggled
        assert SuggestionsPanel.__event_type__ is PageReady

    @pytest.mark.asyncio
    async def test_view_is_logged(self, suggestions):
        await TrackProviderView(suggestions=suggestions).handle(
            ProviderViewed(provider_id="p1", type="lab")
        )

        [interaction] = suggestions.interactions()
        assert interaction.id == "p1"
        assert interaction.kind is InteractionKind.VIEWED
        assert interaction.type == "lab"

    @pytest.mark.asyncio
    async def test_favorite_and_unfavorite_are_logged(self, suggestions):
        tracker = TrackFavorite(suggestions=suggestions)

        await tracker.handle(FavoriteToggled(provider_id="p1", user_id="u", favorited=True))
        await tracker.handle(FavoriteToggled(provider_id="p1", user_id="u", favorited=False))

        assert [i.kind for i in suggestions.interactions()] == [
            InteractionKind.UNFAVORITED,
            InteractionKind.FAVORITED,
        ]


class TestSuggestionsPanel:
    @pytest.mark.asyncio
    async def test_fills_on_home_page(self, suggestions):
        panel = SuggestionsPanel(suggestions=suggestions)

        await panel.handle(PageReady(path="/", pattern="/", query={"location": "Oran"}))

        assert {i.provider_id: i.reason for i in panel.items} == {"near": Reason.LOCATION}

    @pytest.mark.asyncio
    async def test_uses_remembered_location(self, suggestions):
        panel = SuggestionsPanel(suggestions=suggestions)
        panel.location = "Tlemcen"

        await panel.handle(PageReady(path="/home", pattern="/home"))

        assert [i.provider_id for i in panel.items] == ["far"]

    @pytest.mark.asyncio
    async def test_ignores_other_pages(self, suggestions):
        panel = SuggestionsPanel(suggestions=suggestions)

        await panel.handle(PageReady(path="/search", pattern="/search"))

        assert panel.items is None
