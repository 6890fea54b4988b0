"""Session bootstrap shared by the REST server and the CLI."""

import logging
from typing import Any, TypeVar

from dishka import AsyncContainer

from cityhealth.domain.i18n.service.translator import Translator
from cityhealth.domain.navigation.service.navigation import NavigationService
from cityhealth.domain.shared.error import InvalidStateError
from cityhealth.domain.shared.event import EventListener
from cityhealth.domain.shared.port.event_bus import EventBus
from cityhealth.infrastructure.event.di import subscribe_listeners

logger = logging.getLogger(__name__)

L = TypeVar("L", bound=EventListener[Any])


class ApplicationShell:
    """Wires one session together.

    boot() subscribes every listener to the bus and loads the user's
    language; start() additionally starts navigation at the given path.
    Routes are registered by the container before either runs.
    """

    def __init__(self, container: AsyncContainer) -> None:
        self.container = container
        self._listeners: dict[type, EventListener[Any]] = {}

    @property
    def booted(self) -> bool:
        return bool(self._listeners)

    async def boot(self, accept_language: str | None = None) -> str:
        if self.booted:
            raise InvalidStateError("Application shell already booted")
        bus = await self.container.get(EventBus)
        for listener in await subscribe_listeners(self.container, bus):
            self._listeners[type(listener)] = listener
        translator = await self.container.get(Translator)
        language = await translator.initialize(accept_language)
        logger.info("Session booted (language=%s)", language)
        return language

    async def start(self, path: str = "/", accept_language: str | None = None) -> NavigationService:
        await self.boot(accept_language)
        navigation = await self.container.get(NavigationService)
        await navigation.start(path)
        return navigation

    def listener(self, listener_type: type[L]) -> L:
        try:
            return self._listeners[listener_type]  # type: ignore[return-value]
        except KeyError:
            raise InvalidStateError(f"{listener_type.__name__} is not subscribed") from None
