"""Dependency injection provider for the event bus and page listeners."""

import logging
from typing import Any, NewType

from dishka import AsyncContainer, provide

from cityhealth.domain.provider.listener.profile_loader import LoadProfile
from cityhealth.domain.search.listener.search_page import SearchPage
from cityhealth.domain.shared.event import EventListener
from cityhealth.domain.shared.port.event_bus import EventBus
from cityhealth.domain.suggestion.listener.interaction_tracker import (
    TrackFavorite,
    TrackProviderView,
)
from cityhealth.domain.suggestion.listener.suggestions_panel import SuggestionsPanel
from cityhealth.infrastructure.event.memory_bus import InMemoryEventBus
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope

logger = logging.getLogger(__name__)

ListenerTypes = NewType("ListenerTypes", list[type[EventListener[Any]]])

LISTENERS: ListenerTypes = ListenerTypes(
    [
        # Page listeners (PageReady)
        SearchPage,
        SuggestionsPanel,
        LoadProfile,
        # Interaction log
        TrackProviderView,
        TrackFavorite,
    ]
)


async def subscribe_listeners(container: AsyncContainer, bus: EventBus) -> list[EventListener[Any]]:
    """Resolve every listener from the container and subscribe it to its event type."""
    listener_types = await container.get(ListenerTypes)
    listeners = []
    for listener_type in listener_types:
        listener = await container.get(listener_type)
        bus.subscribe(listener_type.__event_type__, listener.handle)
        listeners.append(listener)
    logger.info("Subscribed %d listeners", len(listeners))
    return listeners


class EventProvider(Provider):
    """Provides the event bus and the listeners, all APP-scoped.

    Listener instances keep the state the pages render (search view,
    suggestion items, loaded profile), so there is one of each per session.
    """

    @provide(scope=Scope.APP)
    def get_event_bus(self) -> EventBus:
        return InMemoryEventBus()

    for _listener_type in LISTENERS:
        locals()[_listener_type.__name__] = provide(_listener_type, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_listener_types(self) -> ListenerTypes:
        return LISTENERS
