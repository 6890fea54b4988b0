from dishka import provide

from cityhealth.config import Config
from cityhealth.domain.i18n.port.catalog_loader import CatalogLoader
from cityhealth.domain.i18n.service.translator import Translator
from cityhealth.domain.shared.port.event_bus import EventBus
from cityhealth.domain.shared.port.local_state import LocalState
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope


class I18nProvider(Provider):
    @provide(scope=Scope.APP)
    def get_translator(
        self,
        loader: CatalogLoader,
        state: LocalState,
        bus: EventBus,
        config: Config,
    ) -> Translator:
        return Translator(loader=loader, state=state, bus=bus, config=config.i18n)
