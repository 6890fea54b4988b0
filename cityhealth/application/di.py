from dishka import AsyncContainer, from_context, make_async_container

from cityhealth.config import Config
from cityhealth.domain.chatbot.util.di import ChatbotProvider
from cityhealth.domain.i18n.util.di import I18nProvider
from cityhealth.domain.navigation.util.di import NavigationProvider
from cityhealth.domain.provider.util.di import ProviderDirectoryProvider
from cityhealth.domain.search.util.di import SearchProvider
from cityhealth.domain.suggestion.util.di import SuggestionProvider
from cityhealth.infrastructure.auth.di import AuthInfraProvider
from cityhealth.infrastructure.event.di import EventProvider
from cityhealth.infrastructure.http.di import HttpProvider
from cityhealth.infrastructure.persistence.di import PersistenceProvider
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope


class ConfigProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        ConfigProvider(),
        PersistenceProvider(),
        HttpProvider(),
        AuthInfraProvider(),
        EventProvider(),
        I18nProvider(),
        SearchProvider(),
        SuggestionProvider(),
        ProviderDirectoryProvider(),
        NavigationProvider(),
        ChatbotProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
