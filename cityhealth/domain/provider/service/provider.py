"""ProviderService - profile reads, view counting, favorites and images."""

import logging
import time
from collections.abc import Callable
from pathlib import PurePosixPath
from typing import Any

from cityhealth.domain.auth.model.principal import Principal
from cityhealth.domain.auth.model.role import Role
from cityhealth.domain.provider.event.favorite_toggled import FavoriteToggled
from cityhealth.domain.provider.event.provider_viewed import ProviderViewed
from cityhealth.domain.provider.port.image_storage import ImageStorage
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.shared.authorization.gate import at_least
from cityhealth.domain.shared.error import (
    AuthorizationError,
    CityHealthError,
    NotFoundError,
    ValidationError,
)
from cityhealth.domain.shared.model.value import ProviderId
from cityhealth.domain.shared.port.event_bus import EventBus
from cityhealth.domain.shared.port.local_state import FAVORITES_KEY, LocalState
from cityhealth.domain.shared.service import Service

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp"})
MAX_IMAGE_BYTES = 5 * 1024 * 1024

_FAVORITE_GATE = at_least(Role.CITIZEN)
_IMAGE_GATE = at_least(Role.PROVIDER)


class ProviderService(Service):
    store: ProviderStore
    images: ImageStorage
    state: LocalState
    bus: EventBus
    wall_clock: Callable[[], float] = time.time

    async def get(self, provider_id: str) -> dict[str, Any]:
        document = await self.store.get(provider_id)
        if document is None:
            raise NotFoundError(f"Provider not found: {provider_id}")
        return document

    async def record_view(self, provider_id: str) -> bool:
        """Atomically bump the view counter. Failures are logged, never raised."""
        try:
            await self.store.increment(provider_id, "view_count", 1)
        except CityHealthError as e:
            logger.warning("Could not record view for %s: %s", provider_id, e.message)
            return False
        return True

    async def view_profile(self, provider_id: str) -> dict[str, Any]:
        document = await self.get(provider_id)
        await self.record_view(provider_id)
        await self.bus.publish(
            ProviderViewed(provider_id=ProviderId(provider_id), type=document.get("type"))
        )
        return document

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    def favorites(self, principal: Principal) -> list[str]:
        return [
            str(e["id"])
            for e in self.state.read_list(FAVORITES_KEY)
            if e.get("user_id") == principal.user_id
        ]

    async def toggle_favorite(self, principal: Principal | None, provider_id: str) -> bool:
        """Add or remove a favorite. Returns True when the provider is now a favorite."""
        if principal is None or not _FAVORITE_GATE.allows(principal):
            raise AuthorizationError(
                "You must be signed in to favorite providers", code="sign_in_required"
            )
        document = await self.get(provider_id)

        entries = self.state.read_list(FAVORITES_KEY)
        mine = [
            e for e in entries if e.get("user_id") == principal.user_id and e.get("id") == provider_id
        ]
        if mine:
            entries = [e for e in entries if e not in mine]
            favorited = False
        else:
            entries.insert(
                0, {"id": provider_id, "user_id": principal.user_id, "timestamp": self.wall_clock()}
            )
            favorited = True
        self.state.write(FAVORITES_KEY, entries)

        await self.bus.publish(
            FavoriteToggled(
                provider_id=ProviderId(provider_id),
                user_id=principal.user_id,
                favorited=favorited,
                type=document.get("type"),
            )
        )
        return favorited

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def upload_image(
        self,
        principal: Principal | None,
        provider_id: str,
        filename: str,
        content: bytes,
    ) -> str:
        if principal is None:
            raise AuthorizationError(
                "You must be signed in to upload images", code="sign_in_required"
            )
        if not _IMAGE_GATE.allows(principal):
            raise AuthorizationError("Only providers can upload images")

        extension = PurePosixPath(filename).suffix.lower()
        if extension not in IMAGE_EXTENSIONS:
            raise ValidationError(
                f"Invalid file type '{extension}'. Allowed: {sorted(IMAGE_EXTENSIONS)}",
                field="filename",
            )
        if len(content) > MAX_IMAGE_BYTES:
            raise ValidationError(
                f"File size {len(content)} exceeds maximum {MAX_IMAGE_BYTES}", field="content"
            )

        await self.get(provider_id)
        url = await self.images.upload(provider_id, filename, content)
        await self.store.update(provider_id, {"image_url": url})
        logger.info("Uploaded image for provider %s: %s", provider_id, url)
        return url
