"""Provider search API routes."""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query
from pydantic import ValidationError as PydanticValidationError

from cityhealth.domain.provider.model.record import ProviderCategory
from cityhealth.domain.search.model.value import (
    HistoryEntry,
    SearchFlag,
    SearchRequest,
    SearchResult,
)
from cityhealth.domain.search.service.search import SearchService
from cityhealth.domain.shared.error import ValidationError

router = APIRouter(
    prefix="/search",
    tags=["search"],
    route_class=DishkaRoute,
)


def _split(value: str | None) -> list[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


@router.get("")
async def search_providers(
    search: FromDishka[SearchService],
    q: str = Query("", description="Free-text query"),
    type: str | None = Query(None, description="Provider type, or 'all'"),
    location: str | None = Query(None, description="City, or 'all'"),
    filters: str | None = Query(None, description="Comma-separated flags"),
    page: int = Query(1, ge=1),
    fields: str | None = Query(None, description="Comma-separated fields to return"),
) -> SearchResult:
    """Search verified providers, best rated first."""
    try:
        request = SearchRequest(
            query=q,
            service_type=type,
            location=location,
            filters=frozenset(_split(filters)),
            fields=_split(fields) or None,
            page=page,
        )
    except PydanticValidationError as e:
        field = str(e.errors()[0]["loc"][0]) if e.errors() else None
        raise ValidationError(
            f"Invalid search parameters: {e.error_count()} errors", field=field
        ) from e

    result = await search.search(request)
    search.remember(request)
    if result.has_more:
        search.prefetch_next_page(request)
    return result


@router.get("/popular")
async def popular_providers(
    search: FromDishka[SearchService],
    limit: int = Query(10, ge=1, le=50),
) -> list[dict[str, Any]]:
    return await search.popular(limit)


@router.get("/emergency")
async def emergency_providers(search: FromDishka[SearchService]) -> list[dict[str, Any]]:
    return await search.emergency()


@router.get("/filters")
async def search_filters(search: FromDishka[SearchService]) -> dict[str, list[str]]:
    """Values for the search form's selects."""
    return {
        "types": [c.value for c in ProviderCategory],
        "cities": await search.cities(),
        "flags": [f.value for f in SearchFlag],
    }


@router.get("/history")
async def search_history(search: FromDishka[SearchService]) -> list[HistoryEntry]:
    return search.history()


@router.delete("/history", status_code=204)
async def clear_search_history(search: FromDishka[SearchService]) -> None:
    search.clear_history()
