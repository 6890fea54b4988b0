"""Global test fixtures."""

import os
from typing import Any

import pytest
import pytest_asyncio

# Spans are no-ops in tests; silence the "logfire not configured" warning
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

from cityhealth.config import I18nConfig  # noqa: E402
from cityhealth.domain.i18n.service.translator import Translator  # noqa: E402
from cityhealth.domain.provider.model.record import Address, ProviderRecord  # noqa: E402
from cityhealth.domain.shared.model.value import ProviderId  # noqa: E402
from cityhealth.infrastructure.event.memory_bus import InMemoryEventBus  # noqa: E402
from cityhealth.infrastructure.i18n.catalog_loader import FileCatalogLoader  # noqa: E402
from cityhealth.infrastructure.persistence.adapter.local_state import (  # noqa: E402
    InMemoryLocalState,
)


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def provider_doc(
    id: str,
    type: str = "clinic",
    city: str | None = "X",
    rating: float = 4.0,
    **fields: Any,
) -> dict[str, Any]:
    fields.setdefault("verified", True)
    return ProviderRecord(
        id=ProviderId(id),
        name=fields.pop("name", f"Provider {id}"),
        type=type,
        city=city,
        address=Address(city=city),
        rating=rating,
        **fields,
    ).to_document()


@pytest.fixture
def make_provider():
    """Build a provider document as the backend returns it."""
    return provider_doc


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state() -> InMemoryLocalState:
    return InMemoryLocalState()


@pytest.fixture
def bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest_asyncio.fixture
async def translator(state: InMemoryLocalState, bus: InMemoryEventBus) -> Translator:
    """Translator over the bundled dictionaries, English active."""
    translator = Translator(
        loader=FileCatalogLoader(),
        state=state,
        bus=bus,
        config=I18nConfig(),
    )
    await translator.initialize("en")
    return translator
