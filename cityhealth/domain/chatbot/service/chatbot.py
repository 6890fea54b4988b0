"""ChatbotService - keyword intent detection with localized, provider-backed answers."""

import logging
from typing import Any

import logfire

from cityhealth.domain.chatbot.model.value import (
    ChatbotResponse,
    DetectedIntent,
    Intent,
    QuickReply,
)
from cityhealth.domain.i18n.service.translator import Translator
from cityhealth.domain.provider.model.query import ProviderQuery, verified_providers
from cityhealth.domain.provider.model.record import ProviderCategory
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.domain.shared.error import CityHealthError, ValidationError
from cityhealth.domain.shared.service import Service

logger = logging.getLogger(__name__)

PROVIDER_LIMIT = 5

# Declaration order breaks confidence ties
INTENT_PATTERNS: dict[Intent, dict[str, list[str]]] = {
    Intent.FIND_PROVIDER: {
        "en": ["find", "search", "looking for", "need", "where", "doctor", "clinic", "hospital", "pharmacy", "lab"],
        "fr": ["trouver", "chercher", "cherche", "besoin", "où", "docteur", "clinique", "hôpital", "pharmacie", "laboratoire"],
        "ar": ["ابحث", "أبحث", "أريد", "أين", "طبيب", "عيادة", "مستشفى", "صيدلية", "مختبر", "دكتور"],
    },
    Intent.EMERGENCY: {
        "en": ["emergency", "urgent", "now", "24/7", "immediate", "asap"],
        "fr": ["urgence", "urgent", "maintenant", "24/7", "immédiat", "tout de suite"],
        "ar": ["طوارئ", "عاجل", "الآن", "فوري", "مستعجل"],
    },
    Intent.HOURS: {
        "en": ["hours", "open", "close", "available", "when", "time", "schedule"],
        "fr": ["heures", "ouvert", "fermé", "disponible", "quand", "horaire"],
        "ar": ["ساعات", "مفتوح", "مغلق", "متاح", "متى", "وقت", "مواعيد"],
    },
    Intent.ACCESSIBILITY: {
        "en": ["wheelchair", "accessible", "disability", "handicap"],
        "fr": ["fauteuil roulant", "accessible", "handicap"],
        "ar": ["كرسي متحرك", "متاح", "إعاقة", "معاق"],
    },
    Intent.HOME_VISIT: {
        "en": ["home visit", "house call", "come to", "visit home"],
        "fr": ["visite à domicile", "venir à", "domicile"],
        "ar": ["زيارة منزلية", "يأتي للمنزل", "في البيت"],
    },
    Intent.GREETING: {
        "en": ["hello", "hi", "hey", "good morning", "good afternoon", "good evening"],
        "fr": ["bonjour", "salut", "bonsoir"],
        "ar": ["مرحبا", "السلام عليكم", "أهلا", "صباح الخير", "مساء الخير"],
    },
    Intent.HELP: {
        "en": ["help", "how", "what can", "assist", "support"],
        "fr": ["aide", "comment", "que peux", "assister", "support"],
        "ar": ["مساعدة", "كيف", "ماذا يمكن", "ساعد"],
    },
}

CATEGORY_KEYWORDS: dict[ProviderCategory, dict[str, list[str]]] = {
    ProviderCategory.DOCTOR: {"en": ["doctor"], "fr": ["docteur", "médecin"], "ar": ["طبيب", "دكتور"]},
    ProviderCategory.CLINIC: {"en": ["clinic"], "fr": ["clinique"], "ar": ["عيادة"]},
    ProviderCategory.HOSPITAL: {"en": ["hospital"], "fr": ["hôpital"], "ar": ["مستشفى"]},
    ProviderCategory.PHARMACY: {"en": ["pharmacy"], "fr": ["pharmacie"], "ar": ["صيدلية"]},
    ProviderCategory.LAB: {"en": ["lab"], "fr": ["laboratoire"], "ar": ["مختبر"]},
}

QUICK_REPLY_ACTIONS = ("findDoctor", "emergency", "accessibility", "homeVisit")


def _patterns_for(table: dict[str, list[str]], language: str) -> list[str]:
    return table.get(language) or table["en"]


def detect_intent(message: str, language: str) -> DetectedIntent:
    """Score each intent by the share of its keywords found in the message."""
    text = message.lower().strip()
    best = DetectedIntent(type=Intent.UNKNOWN, confidence=0.0)
    for intent, table in INTENT_PATTERNS.items():
        patterns = _patterns_for(table, language)
        found = sum(1 for p in patterns if p.lower() in text)
        if found == 0:
            continue
        confidence = found / len(patterns)
        if confidence > best.confidence:
            best = DetectedIntent(type=intent, confidence=confidence)
    return best


def detect_category(message: str, language: str) -> ProviderCategory | None:
    text = message.lower()
    for category, table in CATEGORY_KEYWORDS.items():
        if any(word in text for word in _patterns_for(table, language)):
            return category
    return None


class ChatbotService(Service):
    """Answers chat messages.

    Provider-bearing intents return up to five verified providers, best
    rated first. Lookup failures produce a localized error reply.
    """

    store: ProviderStore
    translator: Translator

    async def process(self, message: str, language: str = "en") -> ChatbotResponse:
        if not isinstance(message, str) or not message.strip():
            raise ValidationError("Message is required and must be a string", field="message")

        language = self.translator.resolve_language(language)
        await self.translator.ensure_loaded(language)

        with logfire.span("ProcessChatbotMessage"):
            intent = detect_intent(message, language)
            logger.debug("Chatbot intent %s (%.2f)", intent.type, intent.confidence)
            try:
                return await self._respond(intent.type, message, language)
            except CityHealthError as e:
                logger.error("Chatbot %s lookup failed: %s", intent.type, e.message)
                return ChatbotResponse(
                    text=self._t("chatbot.error", language),
                    intent=intent.type,
                    error=True,
                )

    async def _respond(self, intent: Intent, message: str, language: str) -> ChatbotResponse:
        match intent:
            case Intent.GREETING | Intent.HELP | Intent.UNKNOWN:
                return ChatbotResponse(
                    text=self._t(f"chatbot.{intent.value}", language),
                    intent=intent,
                    suggestions=self.quick_replies(language),
                )
            case Intent.HOURS:
                return ChatbotResponse(
                    text=self._t("chatbot.hours", language),
                    intent=intent,
                    suggestions=[
                        QuickReply(
                            text=self._t("chatbot.quickReplies.emergency", language),
                            action="emergency",
                        )
                    ],
                )
            case Intent.EMERGENCY:
                query = verified_providers().where("available_24_7", True)
            case Intent.ACCESSIBILITY:
                query = verified_providers().where("accessibility", True)
            case Intent.HOME_VISIT:
                query = verified_providers().where("home_visits", True)
            case Intent.FIND_PROVIDER:
                query = verified_providers()
                category = detect_category(message, language)
                if category is not None:
                    query = query.where("type", category.value)

        providers = await self._top(query)
        if not providers and intent is Intent.FIND_PROVIDER:
            return ChatbotResponse(
                text=self._t("chatbot.noProviders", language),
                intent=intent,
                suggestions=self.quick_replies(language),
            )
        return ChatbotResponse(
            text=self._t(f"chatbot.found.{intent.value}", language, count=len(providers)),
            intent=intent,
            providers=providers,
            action="showProviders",
        )

    async def _top(self, query: ProviderQuery) -> list[dict[str, Any]]:
        page = await self.store.query(query.order("rating").take(PROVIDER_LIMIT))
        return page.documents

    def quick_replies(self, language: str) -> list[QuickReply]:
        return [
            QuickReply(text=self._t(f"chatbot.quickReplies.{action}", language), action=action)
            for action in QUICK_REPLY_ACTIONS
        ]

    def _t(self, key: str, language: str, **params: Any) -> str:
        return self.translator.t(key, language=language, **params)
