"""Chatbot API route."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from cityhealth.domain.chatbot.model.value import ChatbotRequest, ChatbotResponse
from cityhealth.domain.chatbot.service.chatbot import ChatbotService

router = APIRouter(tags=["chatbot"], route_class=DishkaRoute)


@router.post("/chatbot")
async def chatbot(
    body: ChatbotRequest,
    chatbot: FromDishka[ChatbotService],
) -> ChatbotResponse:
    return await chatbot.process(body.message, body.language)
