"""Search requests and results.

A SearchRequest serializes deterministically: keys sorted, filters and
fields sorted, no whitespace. The serialized form is the result-cache key,
and the same form minus page and fields is the pagination context.
"""

import json
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cityhealth.domain.provider.model.record import ProviderCategory

# "all" is what the search form submits for an unset select
_ANY = "all"


class SearchFlag(StrEnum):
    ACCESSIBILITY = "accessibility"
    HOME_VISITS = "home_visits"
    AVAILABLE_24_7 = "available_24_7"


class SearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = ""
    service_type: ProviderCategory | None = None
    location: str | None = None
    filters: frozenset[SearchFlag] = frozenset()
    fields: tuple[str, ...] | None = None
    page: int = Field(default=1, ge=1)

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: Any) -> str:
        return (v or "").strip()

    @field_validator("service_type", "location", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and (not v.strip() or v.strip() == _ANY):
            return None
        return v

    @field_validator("fields", mode="before")
    @classmethod
    def _normalize_fields(cls, v: Any) -> Any:
        if v is None:
            return None
        return tuple(sorted(set(v)))

    def _key_data(self, *, include_page: bool) -> dict[str, Any]:
        data: dict[str, Any] = {
            "query": self.query,
            "service_type": self.service_type.value if self.service_type else None,
            "location": self.location,
            "filters": sorted(f.value for f in self.filters),
        }
        if include_page:
            data["fields"] = list(self.fields) if self.fields is not None else None
            data["page"] = self.page
        return data

    def serialize(self) -> str:
        """Cache key: identical for requests differing only in filter order."""
        return json.dumps(self._key_data(include_page=True), sort_keys=True, separators=(",", ":"))

    @classmethod
    def deserialize(cls, key: str) -> "SearchRequest":
        return cls.model_validate(json.loads(key))

    def context_key(self) -> str:
        """Pagination context: the request minus page and field projection."""
        return json.dumps(
            self._key_data(include_page=False), sort_keys=True, separators=(",", ":")
        )

    def for_page(self, page: int) -> "SearchRequest":
        return self.model_copy(update={"page": page})

    def log_params(self) -> dict[str, Any]:
        return self._key_data(include_page=True)


class SearchResult(BaseModel):
    """One page of search results.

    ``total`` counts the providers on this page after text filtering; the
    backend offers no count query.
    """

    providers: list[dict[str, Any]]
    total: int
    page: int
    page_size: int
    has_more: bool
    query_time_ms: float = 0.0

    @classmethod
    def empty(cls, page: int, page_size: int) -> "SearchResult":
        return cls(providers=[], total=0, page=page, page_size=page_size, has_more=False)


class HistoryEntry(BaseModel):
    """A search the user ran, as kept in the persisted search history."""

    id: str
    service_type: str | None = None
    location: str | None = None
    query: str = ""
    timestamp: float
