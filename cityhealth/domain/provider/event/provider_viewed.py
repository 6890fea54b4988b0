from cityhealth.domain.shared.event import Event
from cityhealth.domain.shared.model.value import ProviderId


class ProviderViewed(Event):
    """Emitted when a provider profile is opened."""

    provider_id: ProviderId
    type: str | None = None
