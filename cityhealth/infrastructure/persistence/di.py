import logging
from typing import AsyncIterable

from dishka import provide

from cityhealth.config import Config
from cityhealth.domain.provider.model.query import CompositeIndex, IndexCatalog
from cityhealth.domain.provider.port.image_storage import ImageStorage
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.shared.port.local_state import LocalState
from cityhealth.infrastructure.persistence.adapter.local_state import JsonFileLocalState
from cityhealth.infrastructure.persistence.database import (
    create_db_engine,
    create_schema,
    create_session_factory,
)
from cityhealth.infrastructure.persistence.memory_store import InMemoryProviderStore
from cityhealth.infrastructure.persistence.repository.provider import SqlProviderStore
from cityhealth.infrastructure.persistence.seed import DEMO_PROVIDERS
from cityhealth.infrastructure.storage.local_images import LocalImageStorage
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope

logger = logging.getLogger(__name__)


def build_index_catalog(config: Config) -> IndexCatalog:
    return IndexCatalog(
        indexes=[
            CompositeIndex(equality=frozenset(d.equality), order_by=tuple(d.order_by))
            for d in config.database.indexes
        ]
    )


class PersistenceProvider(Provider):
    @provide(scope=Scope.APP)
    def get_index_catalog(self, config: Config) -> IndexCatalog:
        return build_index_catalog(config)

    @provide(scope=Scope.APP)
    async def get_provider_store(
        self, config: Config, indexes: IndexCatalog
    ) -> AsyncIterable[ProviderStore]:
        if config.database.url is None:
            logger.info("No database configured, serving %d demo providers", len(DEMO_PROVIDERS))
            yield InMemoryProviderStore(DEMO_PROVIDERS, indexes=indexes)
            return

        engine = create_db_engine(config.database.url, echo=config.database.echo)
        await create_schema(engine)
        yield SqlProviderStore(create_session_factory(engine), indexes=indexes)
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_local_state(self, config: Config) -> LocalState:
        return JsonFileLocalState(config.state.dir)

    @provide(scope=Scope.APP)
    def get_image_storage(self, config: Config) -> ImageStorage:
        return LocalImageStorage(config.storage.images_dir, config.storage.public_base_url)
