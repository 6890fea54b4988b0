"""Tests for the SQLAlchemy provider store against in-memory SQLite."""

import pytest
import pytest_asyncio

from cityhealth.domain.provider.model.query import (
    IndexCatalog,
    ProviderQuery,
    verified_providers,
)
from cityhealth.domain.provider.service.provider import ProviderService
from cityhealth.domain.shared.error import (
    NotFoundError,
    QueryConfigurationError,
    StorageUnavailableError,
    ValidationError,
)
from cityhealth.infrastructure.persistence.database import (
    create_db_engine,
    create_schema,
    create_session_factory,
)
from cityhealth.infrastructure.persistence.repository.provider import SqlProviderStore
from cityhealth.infrastructure.persistence.seed import DEMO_PROVIDERS, seed_providers
from cityhealth.infrastructure.storage.local_images import LocalImageStorage
from conftest import provider_doc


@pytest_asyncio.fixture
async def store():
    engine = create_db_engine("sqlite+aiosqlite:///:memory:")
    await create_schema(engine)
    store = SqlProviderStore(create_session_factory(engine))
    for document in [
        provider_doc("b", rating=4.0, city="Oran"),
        provider_doc("a", rating=4.0, city="Oran", specialty="Cardiology"),
        provider_doc("c", rating=5.0, type="lab", city="Tlemcen"),
        provider_doc("d", rating=3.0, verified=False),
        provider_doc("e", rating=4.0, city="Oran"),
    ]:
        await store.save(document)
    yield store
    await engine.dispose()


def ids(page) -> list[str]:
    return [d["id"] for d in page.documents]


class TestSqlQuery:
    @pytest.mark.asyncio
    async def test_filters_and_orders(self, store):
        page = await store.query(verified_providers().where("city", "Oran").order("rating"))

        assert ids(page) == ["a", "b", "e"]

    @pytest.mark.asyncio
    async def test_keyset_pagination_across_ties(self, store):
        query = verified_providers().order("rating").take(2)

        first = await store.query(query)
        second = await store.query(query.after(first.last))
        third = await store.query(query.after(second.last))

        assert ids(first) == ["c", "a"]
        assert ids(second) == ["b", "e"]
        assert ids(third) == []
        assert third.last is None

    @pytest.mark.asyncio
    async def test_two_order_fields(self, store):
        await store.increment("e", "view_count", 5)
        query = verified_providers().order("rating").order("view_count").take(2)

        first = await store.query(query)
        second = await store.query(query.after(first.last))

        assert ids(first) == ["c", "e"]
        assert ids(second) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_document_fields_survive_round_trip(self, store):
        document = await store.get("a")

        assert document["specialty"] == "Cardiology"
        assert document["address"] == {"street": None, "city": "Oran", "postal_code": None}
        assert document["verified"] is True

    @pytest.mark.asyncio
    async def test_unknown_field_is_not_queryable(self, store):
        with pytest.raises(ValidationError):
            await store.query(ProviderQuery().where("specialty", "Cardiology"))

    @pytest.mark.asyncio
    async def test_index_catalog_is_enforced(self, store):
        strict = SqlProviderStore(store._session_factory, indexes=IndexCatalog([]))

        with pytest.raises(QueryConfigurationError):
            await strict.query(verified_providers().where("type", "lab").order("rating"))


class TestSqlWrites:
    @pytest.mark.asyncio
    async def test_increment(self, store):
        await store.increment("a", "view_count")
        await store.increment("a", "view_count")

        assert (await store.get("a"))["view_count"] == 2

    @pytest.mark.asyncio
    async def test_update_merges_document(self, store):
        await store.update("a", {"image_url": "http://img/a.png", "rating": 4.5})

        document = await store.get("a")
        assert document["image_url"] == "http://img/a.png"
        assert document["rating"] == 4.5
        assert document["specialty"] == "Cardiology"

    @pytest.mark.asyncio
    async def test_missing_provider(self, store):
        assert await store.get("zz") is None
        with pytest.raises(NotFoundError):
            await store.increment("zz", "view_count")
        with pytest.raises(NotFoundError):
            await store.update("zz", {"rating": 1.0})

    @pytest.mark.asyncio
    async def test_get_many(self, store):
        assert [d["id"] for d in await store.get_many(["e", "zz", "a"])] == ["e", "a"]
        assert await store.get_many([]) == []

    @pytest.mark.asyncio
    async def test_save_replaces(self, store):
        await store.save(provider_doc("a", rating=1.0, name="Renamed"))

        document = await store.get("a")
        assert document["name"] == "Renamed"
        assert document["rating"] == 1.0

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, store):
        assert await seed_providers(store) == len(DEMO_PROVIDERS)
        assert await seed_providers(store) == len(DEMO_PROVIDERS)

        page = await store.query(ProviderQuery())
        assert len(page.documents) == 5 + len(DEMO_PROVIDERS)


@pytest_asyncio.fixture
async def store_without_schema():
    engine = create_db_engine("sqlite+aiosqlite:///:memory:")
    yield SqlProviderStore(create_session_factory(engine))
    await engine.dispose()


class TestBackendFailure:
    @pytest.mark.asyncio
    async def test_every_operation_raises_storage_unavailable(self, store_without_schema):
        store = store_without_schema

        with pytest.raises(StorageUnavailableError):
            await store.query(verified_providers())
        with pytest.raises(StorageUnavailableError):
            await store.get("a")
        with pytest.raises(StorageUnavailableError):
            await store.get_many(["a"])
        with pytest.raises(StorageUnavailableError):
            await store.increment("a", "view_count")
        with pytest.raises(StorageUnavailableError):
            await store.update("a", {"rating": 1.0})
        with pytest.raises(StorageUnavailableError):
            await store.save(provider_doc("a"))

    @pytest.mark.asyncio
    async def test_driver_text_stays_out_of_the_message(self, store_without_schema):
        with pytest.raises(StorageUnavailableError) as exc_info:
            await store_without_schema.get("a")

        assert "no such table" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_view_recording_survives_backend_failure(
        self, store_without_schema, state, bus, clock, tmp_path
    ):
        service = ProviderService(
            store=store_without_schema,
            images=LocalImageStorage(tmp_path, "http://img.test"),
            state=state,
            bus=bus,
            wall_clock=clock,
        )

        assert await service.record_view("a") is False
