from abc import abstractmethod
from collections.abc import Awaitable, Callable
from typing import Protocol

from cityhealth.domain.shared.event import Event

EventHandlerFunc = Callable[[Event], Awaitable[None]]


class EventBus(Protocol):
    """Publish/subscribe channel between the navigation controller and feature modules."""

    @abstractmethod
    def subscribe(self, event_type: type[Event], handler: EventHandlerFunc) -> None: ...

    @abstractmethod
    async def publish(self, event: Event) -> None: ...
