from dishka import provide

from cityhealth.domain.chatbot.service.chatbot import ChatbotService
from cityhealth.util.di.base import Provider
from cityhealth.util.di.scope import Scope


class ChatbotProvider(Provider):
    chatbot_service = provide(ChatbotService, scope=Scope.APP)
