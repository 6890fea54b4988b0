"""DI provider for auth infrastructure."""

from dishka import provide

from cityhealth.domain.auth.port.identity_provider import IdentityProvider
from cityhealth.infrastructure.auth.session import SessionIdentityProvider
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope


class AuthInfraProvider(Provider):
    @provide(scope=Scope.APP)
    def get_session(self) -> SessionIdentityProvider:
        return SessionIdentityProvider()

    @provide(scope=Scope.APP)
    def get_identity_provider(self, session: SessionIdentityProvider) -> IdentityProvider:
        return session
