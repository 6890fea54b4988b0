from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from cityhealth.domain.shared.model.value import ValueObject


class Intent(StrEnum):
    FIND_PROVIDER = "findProvider"
    EMERGENCY = "emergency"
    HOURS = "hours"
    ACCESSIBILITY = "accessibility"
    HOME_VISIT = "homeVisit"
    GREETING = "greeting"
    HELP = "help"
    UNKNOWN = "unknown"


class DetectedIntent(ValueObject):
    type: Intent
    confidence: float = 0.0


class QuickReply(ValueObject):
    text: str
    action: str


class ChatbotRequest(BaseModel):
    message: str
    language: str = "en"


class ChatbotResponse(BaseModel):
    text: str
    intent: Intent = Intent.UNKNOWN
    providers: list[dict[str, Any]] | None = None
    action: str | None = None
    suggestions: list[QuickReply] = Field(default_factory=list)
    error: bool = False
