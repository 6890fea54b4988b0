from dishka import provide

from cityhealth.config import Config
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.search.service.search import SearchService
from cityhealth.domain.shared.port.local_state import LocalState
from cityhealth.domain.suggestion.service.suggestion import SuggestionService
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope


class SuggestionProvider(Provider):
    @provide(scope=Scope.APP)
    def get_suggestion_service(
        self,
        store: ProviderStore,
        search: SearchService,
        state: LocalState,
        config: Config,
    ) -> SuggestionService:
        return SuggestionService(
            store=store,
            search=search,
            state=state,
            config=config.suggestions,
        )
