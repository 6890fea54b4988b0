from dishka import provide

from cityhealth.domain.provider.port.image_storage import ImageStorage
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.provider.service.provider import ProviderService
from cityhealth.domain.shared.port.event_bus import EventBus
from cityhealth.domain.shared.port.local_state import LocalState
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope


class ProviderDirectoryProvider(Provider):
    @provide(scope=Scope.APP)
    def get_provider_service(
        self,
        store: ProviderStore,
        images: ImageStorage,
        state: LocalState,
        bus: EventBus,
    ) -> ProviderService:
        return ProviderService(store=store, images=images, state=state, bus=bus)
