"""Tests for SearchRequest normalization and cache-key serialization."""

import pytest
from pydantic import ValidationError

from cityhealth.domain.provider.model.record import ProviderCategory
from cityhealth.domain.search.model.value import SearchFlag, SearchRequest


class TestSerialize:
    def test_filter_order_does_not_change_key(self):
        a = SearchRequest(filters=["accessibility", "home_visits", "available_24_7"])
        b = SearchRequest(filters=["available_24_7", "accessibility", "home_visits"])

        assert a.serialize() == b.serialize()

    def test_deserialize_reproduces_key(self):
        a = SearchRequest(
            query="cardio",
            service_type="doctor",
            location="Oran",
            filters=["home_visits", "accessibility"],
            page=2,
        )
        b = SearchRequest(
            query="cardio",
            service_type="doctor",
            location="Oran",
            filters=["accessibility", "home_visits"],
            page=2,
        )

        assert SearchRequest.deserialize(a.serialize()).serialize() == b.serialize()
        assert SearchRequest.deserialize(a.serialize()) == b

    def test_key_is_compact_sorted_json(self):
        key = SearchRequest(service_type="clinic", location="X").serialize()

        assert key == (
            '{"fields":null,"filters":[],"location":"X","page":1,'
            '"query":"","service_type":"clinic"}'
        )

    def test_field_order_does_not_change_key(self):
        a = SearchRequest(fields=["rating", "name"])
        b = SearchRequest(fields=["name", "rating", "name"])

        assert a.serialize() == b.serialize()
        assert a.fields == ("name", "rating")

    def test_different_pages_have_different_keys(self):
        request = SearchRequest(service_type="clinic")

        assert request.serialize() != request.for_page(2).serialize()


class TestContextKey:
    def test_context_ignores_page_and_fields(self):
        a = SearchRequest(service_type="clinic", page=1)
        b = SearchRequest(service_type="clinic", page=3, fields=["name"])

        assert a.context_key() == b.context_key()

    def test_context_differs_by_filters(self):
        a = SearchRequest(service_type="clinic")
        b = SearchRequest(service_type="clinic", filters=["accessibility"])

        assert a.context_key() != b.context_key()


class TestNormalization:
    def test_all_and_blank_mean_unset(self):
        request = SearchRequest(service_type="all", location="  ")

        assert request.service_type is None
        assert request.location is None

    def test_query_is_stripped(self):
        assert SearchRequest(query="  pharmacy ").query == "pharmacy"

    def test_values_are_typed(self):
        request = SearchRequest(service_type="lab", filters=["available_24_7"])

        assert request.service_type is ProviderCategory.LAB
        assert request.filters == frozenset({SearchFlag.AVAILABLE_24_7})

    def test_rejects_page_zero(self):
        with pytest.raises(ValidationError):
            SearchRequest(page=0)

    def test_rejects_unknown_filter(self):
        with pytest.raises(ValidationError):
            SearchRequest(filters=["parking"])
