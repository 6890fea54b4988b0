"""SuggestionsPanel - fills the home page's suggestion panel once the page is shown."""

import logging
from dataclasses import field

from cityhealth.domain.navigation.event.page_ready import PageReady
from cityhealth.domain.shared.event import EventListener
from cityhealth.domain.suggestion.model.value import SuggestionContext, SuggestionItem
from cityhealth.domain.suggestion.service.suggestion import SuggestionService

logger = logging.getLogger(__name__)

PANEL_PATTERNS = frozenset({"/", "/home"})


class SuggestionsPanel(EventListener[PageReady]):
    suggestions: SuggestionService
    location: str | None = field(default=None, init=False)
    items: list[SuggestionItem] | None = field(default=None, init=False)

    async def handle(self, event: PageReady) -> None:
        if event.pattern not in PANEL_PATTERNS:
            return
        context = SuggestionContext(location=event.query.get("location") or self.location)
        self.items = await self.suggestions.get_suggestions(context)
        logger.debug("Suggestions panel: %d items", len(self.items))
