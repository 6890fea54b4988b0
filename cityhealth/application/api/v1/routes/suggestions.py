"""Suggestion and interaction API routes."""

from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from cityhealth.domain.provider.model.record import ProviderCategory
from cityhealth.domain.suggestion.model.value import (
    Interaction,
    InteractionKind,
    SuggestionContext,
    SuggestionItem,
)
from cityhealth.domain.suggestion.service.suggestion import SuggestionService

router = APIRouter(tags=["suggestions"], route_class=DishkaRoute)


class DismissResponse(BaseModel):
    provider_id: str
    dismissed: bool


class TrackInteractionRequest(BaseModel):
    provider_id: str
    kind: InteractionKind
    data: dict[str, Any] = Field(default_factory=dict)


@router.get("/suggestions")
async def get_suggestions(
    suggestions: FromDishka[SuggestionService],
    location: str | None = Query(None),
    type: ProviderCategory | None = Query(None),
) -> list[SuggestionItem]:
    """Up to ten suggested providers, each with the reason it was picked."""
    return await suggestions.get_suggestions(
        SuggestionContext(location=location or None, service_type=type)
    )


@router.post("/suggestions/{provider_id}/dismiss")
async def dismiss_suggestion(
    provider_id: str,
    suggestions: FromDishka[SuggestionService],
) -> DismissResponse:
    newly = suggestions.dismiss(provider_id)
    return DismissResponse(provider_id=provider_id, dismissed=newly)


@router.delete("/suggestions/dismissed", status_code=204)
async def clear_dismissed(suggestions: FromDishka[SuggestionService]) -> None:
    suggestions.clear_dismissed()


@router.post("/interactions", status_code=201)
async def track_interaction(
    body: TrackInteractionRequest,
    suggestions: FromDishka[SuggestionService],
) -> Interaction:
    return suggestions.track_interaction(body.provider_id, body.kind, body.data)


@router.get("/interactions")
async def list_interactions(suggestions: FromDishka[SuggestionService]) -> list[Interaction]:
    return suggestions.interactions()
