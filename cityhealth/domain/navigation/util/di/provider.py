from dishka import provide

from cityhealth.config import Config
from cityhealth.domain.auth.port.identity_provider import IdentityProvider
from cityhealth.domain.i18n.service.translator import Translator
from cityhealth.domain.navigation.model.route import RouteTable
from cityhealth.domain.navigation.model.site import register_site_routes
from cityhealth.domain.navigation.model.viewport import Viewport
from cityhealth.domain.navigation.port.template_store import TemplateStore
from cityhealth.domain.navigation.service.navigation import NavigationService
from cityhealth.domain.shared.port.event_bus import EventBus
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope


class NavigationProvider(Provider):
    @provide(scope=Scope.APP)
    def get_viewport(self) -> Viewport:
        return Viewport()

    @provide(scope=Scope.APP)
    def get_route_table(self) -> RouteTable:
        return register_site_routes(RouteTable())

    @provide(scope=Scope.APP)
    def get_navigation_service(
        self,
        routes: RouteTable,
        templates: TemplateStore,
        viewport: Viewport,
        bus: EventBus,
        identity: IdentityProvider,
        translator: Translator,
        config: Config,
    ) -> NavigationService:
        return NavigationService(
            routes=routes,
            templates=templates,
            viewport=viewport,
            bus=bus,
            identity=identity,
            config=config.navigation,
            translator=translator,
        )
