"""Tests for the chatbot's intent detection and replies."""

import pytest

from cityhealth.domain.chatbot.model.value import Intent
from cityhealth.domain.chatbot.service.chatbot import ChatbotService, detect_category, detect_intent
from cityhealth.domain.shared.error import ValidationError
from cityhealth.infrastructure.persistence.memory_store import InMemoryProviderStore
from conftest import provider_doc


@pytest.fixture
def store() -> InMemoryProviderStore:
    return InMemoryProviderStore(
        [
            provider_doc("dr-a", type="doctor", rating=4.0, home_visits=True),
            provider_doc("dr-b", type="doctor", rating=4.8),
            provider_doc("dr-hidden", type="doctor", rating=5.0, verified=False),
            provider_doc("er", type="hospital", available_24_7=True, accessibility=True),
        ]
    )


@pytest.fixture
def chatbot(store, translator) -> ChatbotService:
    return ChatbotService(store=store, translator=translator)


class TestDetectIntent:
    @pytest.mark.parametrize(
        ("message", "language", "intent"),
        [
            ("Hello", "en", Intent.GREETING),
            ("I need a doctor", "en", Intent.FIND_PROVIDER),
            ("emergency pharmacy now", "en", Intent.EMERGENCY),
            ("wheelchair accessible", "en", Intent.ACCESSIBILITY),
            ("what are your opening hours", "en", Intent.HOURS),
            ("can a doctor do a home visit", "en", Intent.HOME_VISIT),
            ("Bonjour", "fr", Intent.GREETING),
            ("أين صيدلية", "ar", Intent.FIND_PROVIDER),
            ("qwerty", "en", Intent.UNKNOWN),
        ],
    )
    def test_detects(self, message, language, intent):
        assert detect_intent(message, language).type is intent

    def test_confidence_is_share_of_keywords(self):
        detected = detect_intent("wheelchair accessible", "en")

        assert detected.confidence == pytest.approx(0.5)

    def test_unknown_language_uses_english_keywords(self):
        assert detect_intent("hello", "es").type is Intent.GREETING

    def test_detect_category(self):
        assert detect_category("I need a pharmacy", "en") == "pharmacy"
        assert detect_category("je cherche un médecin", "fr") == "doctor"
        assert detect_category("anything", "en") is None


class TestProcess:
    @pytest.mark.asyncio
    async def test_greeting_offers_quick_replies(self, chatbot, translator):
        response = await chatbot.process("hello")

        assert response.intent is Intent.GREETING
        assert response.text == translator.t("chatbot.greeting")
        assert [r.action for r in response.suggestions] == [
            "findDoctor",
            "emergency",
            "accessibility",
            "homeVisit",
        ]

    @pytest.mark.asyncio
    async def test_find_provider_returns_verified_by_rating(self, chatbot):
        response = await chatbot.process("I need a doctor")

        assert [p["id"] for p in response.providers] == ["dr-b", "dr-a"]
        assert response.action == "showProviders"
        assert "2" in response.text

    @pytest.mark.asyncio
    async def test_home_visit(self, chatbot):
        response = await chatbot.process("home visit please")

        assert response.intent is Intent.HOME_VISIT
        assert [p["id"] for p in response.providers] == ["dr-a"]

    @pytest.mark.asyncio
    async def test_emergency_is_limited_to_five(self, store, chatbot):
        for i in range(7):
            store.put(provider_doc(f"er-{i}", type="hospital", available_24_7=True, rating=float(i)))

        response = await chatbot.process("emergency!")

        assert response.intent is Intent.EMERGENCY
        assert len(response.providers) == 5
        assert response.providers[0]["id"] == "er-6"

    @pytest.mark.asyncio
    async def test_no_matching_providers(self, chatbot, translator):
        response = await chatbot.process("I need a lab")

        assert response.providers is None
        assert response.text == translator.t("chatbot.noProviders")
        assert response.suggestions

    @pytest.mark.asyncio
    async def test_replies_in_requested_language(self, chatbot, translator):
        response = await chatbot.process("bonjour", language="fr")

        assert response.text == translator.t("chatbot.greeting", language="fr")
        assert response.text != translator.t("chatbot.greeting", language="en")

    @pytest.mark.asyncio
    async def test_unsupported_language_replies_in_english(self, chatbot, translator):
        response = await chatbot.process("hello", language="es")

        assert response.text == translator.t("chatbot.greeting", language="en")

    @pytest.mark.asyncio
    async def test_lookup_failure_is_an_error_reply(self, store, chatbot, translator):
        store.available = False

        response = await chatbot.process("emergency")

        assert response.error is True
        assert response.intent is Intent.EMERGENCY
        assert response.text == translator.t("chatbot.error")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   "])
    async def test_blank_message_is_rejected(self, chatbot, message):
        with pytest.raises(ValidationError) as exc_info:
            await chatbot.process(message)

        assert exc_info.value.field == "message"
