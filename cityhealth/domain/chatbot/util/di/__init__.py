from cityhealth.domain.chatbot.util.di.provider import ChatbotProvider

__all__ = ["ChatbotProvider"]
