import asyncio
import logging
from collections import defaultdict

from cityhealth.domain.shared.event import Event
from cityhealth.domain.shared.port.event_bus import EventBus, EventHandlerFunc

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """Delivers events to subscribers in-process.

    Handlers for one event run concurrently. A failing handler is logged and
    does not prevent delivery to the others.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type[Event], list[EventHandlerFunc]] = defaultdict(list)

    def subscribe(self, event_type: type[Event], handler: EventHandlerFunc) -> None:
        self._subscribers[event_type].append(handler)

    def subscriber_count(self, event_type: type[Event]) -> int:
        return len(self._subscribers.get(event_type, []))

    async def publish(self, event: Event) -> None:
        event_type = type(event)
        handlers = list(self._subscribers.get(event_type, []))

        if not handlers:
            logger.debug("No handlers for event %s", event_type.__name__)
            return

        logger.debug("Publishing event %s to %d handlers", event_type.__name__, len(handlers))

        results = await asyncio.gather(*[h(event) for h in handlers], return_exceptions=True)
        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(
                    "Handler %s failed for event %s",
                    getattr(handler, "__qualname__", repr(handler)),
                    event_type.__name__,
                    exc_info=result,
                )
