"""Listeners feeding the suggestion engine's interaction log."""

from cityhealth.domain.provider.event.favorite_toggled import FavoriteToggled
from cityhealth.domain.provider.event.provider_viewed import ProviderViewed
from cityhealth.domain.shared.event import EventListener
from cityhealth.domain.suggestion.model.value import InteractionKind
from cityhealth.domain.suggestion.service.suggestion import SuggestionService


class TrackProviderView(EventListener[ProviderViewed]):
    suggestions: SuggestionService

    async def handle(self, event: ProviderViewed) -> None:
        self.suggestions.track_interaction(
            event.provider_id, InteractionKind.VIEWED, {"type": event.type}
        )


class TrackFavorite(EventListener[FavoriteToggled]):
    suggestions: SuggestionService

    async def handle(self, event: FavoriteToggled) -> None:
        kind = InteractionKind.FAVORITED if event.favorited else InteractionKind.UNFAVORITED
        self.suggestions.track_interaction(event.provider_id, kind, {"type": event.type})
