"""Domain events published on the in-process event bus."""

from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import (
    Any,
    ClassVar,
    Generic,
    NewType,
    TypeVar,
    dataclass_transform,
    get_args,
    get_origin,
)
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from cityhealth.domain.shared.model.value import utc_now

EventId = NewType("EventId", UUID)


def _new_event_id() -> EventId:
    return EventId(uuid4())


class Event(BaseModel):
    """Base class for domain events.

    Subclasses are automatically registered by name in Event._registry.
    """

    model_config = ConfigDict(frozen=True)

    id: EventId = Field(default_factory=_new_event_id)
    created_at: datetime = Field(default_factory=utc_now)

    _registry: ClassVar[dict[str, type["Event"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        Event._registry[cls.__name__] = cls


E = TypeVar("E", bound=Event)


def _extract_event_type(cls: type) -> type[Event] | None:
    """Extract the event type E from EventListener[E] in class bases."""
    for base in getattr(cls, "__orig_bases__", []):
        origin = get_origin(base)
        if origin is not None and getattr(origin, "__name__", None) == "EventListener":
            args = get_args(base)
            if args and isinstance(args[0], type) and issubclass(args[0], Event):
                return args[0]
    return None


@dataclass_transform()
class _EventListenerMeta(ABCMeta):
    """Applies @dataclass and records __event_type__ from EventListener[E]."""

    def __new__(mcs, name: str, bases: tuple[type, ...], namespace: dict[str, Any]) -> type:
        cls = super().__new__(mcs, name, bases, namespace)
        if any(isinstance(b, mcs) for b in bases):
            cls = dataclass(cls)
            event_type = _extract_event_type(cls)
            if event_type is not None:
                cls.__event_type__ = event_type
        return cls


class EventListener(Generic[E], metaclass=_EventListenerMeta):
    """Base class for event listeners.

    Subclasses are dataclasses whose fields are injected by DI. The handled
    event type is taken from the generic parameter, so wiring can do
    ``bus.subscribe(listener.__event_type__, listener.handle)``.

    Example:
        class LoadProfile(EventListener[PageReady]):
            providers: ProviderService

            async def handle(self, event: PageReady) -> None: ...
    """

    __event_type__: ClassVar[type[Event]]

    @abstractmethod
    async def handle(self, event: E) -> None: ...
