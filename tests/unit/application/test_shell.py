"""Integration tests: a full session wired by the DI container."""

import pytest
import pytest_asyncio

from cityhealth.application.di import create_container
from cityhealth.application.shell import ApplicationShell
from cityhealth.config import Config, StateConfig, StorageConfig
from cityhealth.domain.auth.model.principal import Principal
from cityhealth.domain.auth.model.role import Role
from cityhealth.domain.navigation.model.viewport import NavigationState, Viewport
from cityhealth.domain.navigation.service.navigation import NavigationService
from cityhealth.domain.provider.listener.profile_loader import LoadProfile
from cityhealth.domain.provider.service.provider import ProviderService
from cityhealth.domain.search.listener.search_page import SearchPage
from cityhealth.domain.search.service.search import SearchService
from cityhealth.domain.shared.error import InvalidStateError
from cityhealth.domain.suggestion.listener.interaction_tracker import TrackFavorite
from cityhealth.domain.suggestion.listener.suggestions_panel import SuggestionsPanel
from cityhealth.domain.suggestion.service.suggestion import SuggestionService
from cityhealth.infrastructure.auth.session import SessionIdentityProvider
from cityhealth.infrastructure.event.di import LISTENERS


@pytest_asyncio.fixture
async def container(tmp_path):
    config = Config(
        state=StateConfig(dir=tmp_path / "state"),
        storage=StorageConfig(images_dir=tmp_path / "images"),
    )
    container = create_container(config)
    yield container
    await container.close()


@pytest.fixture
def shell(container) -> ApplicationShell:
    return ApplicationShell(container)


class TestBoot:
    @pytest.mark.asyncio
    async def test_subscribes_every_listener(self, shell):
        language = await shell.boot("ar,en;q=0.5")

        assert language == "ar"
        for listener_type in LISTENERS:
            assert isinstance(shell.listener(listener_type), listener_type)

    @pytest.mark.asyncio
    async def test_boot_twice_raises(self, shell):
        await shell.boot()

        with pytest.raises(InvalidStateError):
            await shell.boot()

    def test_listener_before_boot_raises(self, shell):
        with pytest.raises(InvalidStateError):
            shell.listener(SearchPage)


class TestSession:
    @pytest.mark.asyncio
    async def test_search_url_runs_search(self, shell, container):
        navigation = await shell.start("/search?type=clinic&location=Oran")

        assert navigation.state is NavigationState.READY
        view = shell.listener(SearchPage).view
        assert view.message_key == "search.noResults"

        await navigation.navigate("/search?type=clinic")
        view = shell.listener(SearchPage).view
        assert [p["id"] for p in view.result.providers] == [
            "clinique-el-amel",
            "clinique-es-salam",
        ]

        search = await container.get(SearchService)
        assert [h.service_type for h in search.history()] == ["clinic", "clinic"]

    @pytest.mark.asyncio
    async def test_home_page_fills_suggestions(self, shell, container):
        await shell.start("/?location=Oran")

        items = shell.listener(SuggestionsPanel).items
        assert items
        assert "dr-unverified" not in [i.provider_id for i in items]
        viewport = await container.get(Viewport)
        assert viewport.path == "/?location=Oran"
        assert viewport.content

    @pytest.mark.asyncio
    async def test_profile_page_loads_and_logs_view(self, shell, container):
        await shell.start("/profile/clinique-el-amel")

        assert shell.listener(LoadProfile).profile["name"] == "Clinique El Amel"
        suggestions = await container.get(SuggestionService)
        [interaction] = suggestions.interactions()
        assert (interaction.id, interaction.kind, interaction.type) == (
            "clinique-el-amel",
            "viewed",
            "clinic",
        )

    @pytest.mark.asyncio
    async def test_unknown_path_shows_not_found(self, shell, container):
        navigation = await shell.start("/nowhere")

        assert navigation.state is NavigationState.ERROR
        viewport = await container.get(Viewport)
        assert "/nowhere" in viewport.content

    @pytest.mark.asyncio
    async def test_gated_page_requires_sign_in(self, shell, container):
        navigation = await shell.start("/favorites")

        assert navigation.current_path == "/auth"
        assert navigation.return_path == "/favorites"

        identity = await container.get(SessionIdentityProvider)
        identity.sign_in(Principal(user_id="u1", roles=frozenset({Role.CITIZEN})))
        await navigation.resume_after_sign_in()

        assert navigation.current_path == "/favorites"
        assert navigation.state is NavigationState.READY

    @pytest.mark.asyncio
    async def test_routes_are_frozen_after_start(self, shell, container):
        navigation = await shell.start("/")

        with pytest.raises(InvalidStateError):
            navigation.register("/late", "pages/late.html")

    @pytest.mark.asyncio
    async def test_favorite_is_tracked_for_signed_in_user(self, shell, container):
        await shell.boot()
        identity = await container.get(SessionIdentityProvider)
        identity.sign_in(Principal(user_id="u1", roles=frozenset({Role.CITIZEN})))
        navigation = await container.get(NavigationService)
        await navigation.start("/")

        providers = await container.get(ProviderService)
        assert await providers.toggle_favorite(identity.current_principal(), "labo-pasteur")

        suggestions = await container.get(SuggestionService)
        assert suggestions.interactions()[0].kind == "favorited"
        assert isinstance(shell.listener(TrackFavorite), TrackFavorite)
