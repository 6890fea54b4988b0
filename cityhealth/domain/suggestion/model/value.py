from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from cityhealth.domain.provider.model.record import ProviderCategory
from cityhealth.domain.shared.model.value import ValueObject


class Reason(StrEnum):
    """Why a provider was suggested. Declaration order is merge priority."""

    HISTORY = "history"
    POPULAR = "popular"
    LOCATION = "location"
    INTERACTION = "interaction"
    EMERGENCY = "emergency"


class InteractionKind(StrEnum):
    VIEWED = "viewed"
    FAVORITED = "favorited"
    UNFAVORITED = "unfavorited"
    CONTACTED = "contacted"


# Interactions that signal interest in similar providers
INTEREST_KINDS = frozenset({InteractionKind.VIEWED, InteractionKind.FAVORITED})


class SuggestionContext(ValueObject):
    location: str | None = None
    service_type: ProviderCategory | None = None


class SuggestionItem(BaseModel):
    provider: dict[str, Any]
    reason: Reason
    score: float = 0.0

    @property
    def provider_id(self) -> str:
        return str(self.provider["id"])


class Interaction(ValueObject):
    """One entry of the persisted interaction log."""

    id: str
    kind: InteractionKind
    type: str | None = None
    timestamp: float
    data: dict[str, Any] = Field(default_factory=dict)
