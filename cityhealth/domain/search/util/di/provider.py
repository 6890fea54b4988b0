from dishka import provide

from cityhealth.config import Config
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.search.cache import ResultCache
from cityhealth.domain.search.cursor import CursorStore
from cityhealth.domain.search.service.search import SearchService
from cityhealth.domain.shared.port.local_state import LocalState
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope


class SearchProvider(Provider):
    @provide(scope=Scope.APP)
    def get_result_cache(self, config: Config) -> ResultCache:
        return ResultCache(
            ttl_seconds=config.search.cache_ttl_seconds,
            max_entries=config.search.cache_max_entries,
        )

    @provide(scope=Scope.APP)
    def get_cursor_store(self, config: Config) -> CursorStore:
        return CursorStore(max_per_context=config.search.max_cursors_per_context)

    @provide(scope=Scope.APP)
    def get_search_service(
        self,
        store: ProviderStore,
        cache: ResultCache,
        cursors: CursorStore,
        state: LocalState,
        config: Config,
    ) -> SearchService:
        return SearchService(
            store=store,
            cache=cache,
            cursors=cursors,
            state=state,
            config=config.search,
        )
