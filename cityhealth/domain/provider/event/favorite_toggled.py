from cityhealth.domain.shared.event import Event
from cityhealth.domain.shared.model.value import ProviderId


class FavoriteToggled(Event):
    """Emitted when a signed-in user adds or removes a favorite provider."""

    provider_id: ProviderId
    user_id: str
    favorited: bool
    type: str | None = None
