"""LoadProfile - records a profile view when the profile page is shown."""

import logging
from dataclasses import field
from typing import Any

from cityhealth.domain.navigation.event.page_ready import PageReady
from cityhealth.domain.provider.service.provider import ProviderService
from cityhealth.domain.shared.error import NotFoundError
from cityhealth.domain.shared.event import EventListener

logger = logging.getLogger(__name__)

PROFILE_PATTERN = "/profile/:id"


class LoadProfile(EventListener[PageReady]):
    """Loads the provider named by the profile route and counts the view.

    The loaded document is kept on ``profile`` for the page to render.
    """

    providers: ProviderService
    profile: dict[str, Any] | None = field(default=None, init=False)

    async def handle(self, event: PageReady) -> None:
        if event.pattern != PROFILE_PATTERN:
            return
        provider_id = event.params.get("id")
        if not provider_id:
            return
        try:
            self.profile = await self.providers.view_profile(provider_id)
        except NotFoundError:
            logger.info("Profile page for unknown provider %s", provider_id)
            self.profile = None
