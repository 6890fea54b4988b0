"""Chatbot command."""

import asyncio

import cyclopts

from cityhealth.cli.console import get_console
from cityhealth.cli.util.session import open_session
from cityhealth.domain.chatbot.service.chatbot import ChatbotService

app = cyclopts.App(name="chat", help="Ask the CityHealth assistant")


@app.default
def chat(message: str, /, *, language: str = "en") -> None:
    """Send one message to the assistant.

    Args:
        message: What you are looking for, e.g. "I need a pharmacy now".
        language: en, fr or ar.
    """
    console = get_console()

    async def _run() -> None:
        async with open_session(boot=False) as shell:
            chatbot = await shell.container.get(ChatbotService)
            console.chatbot_reply(await chatbot.process(message, language))

    asyncio.run(_run())
