"""Suggestion commands."""

import asyncio

import cyclopts

from cityhealth.cli.console import get_console
from cityhealth.cli.util.session import open_session
from cityhealth.domain.provider.model.record import ProviderCategory
from cityhealth.domain.suggestion.model.value import SuggestionContext
from cityhealth.domain.suggestion.service.suggestion import SuggestionService

app = cyclopts.App(name="suggest", help="Personalized provider suggestions")


@app.default
def suggest(*, location: str | None = None, type: ProviderCategory | None = None) -> None:
    """Show suggested providers and why each was picked.

    Args:
        location: City to favor nearby providers in.
        type: Narrow nearby suggestions to one provider type.
    """
    console = get_console()

    async def _run() -> None:
        async with open_session(boot=False) as shell:
            service = await shell.container.get(SuggestionService)
            items = await service.get_suggestions(
                SuggestionContext(location=location, service_type=type)
            )
            console.suggestions(items)

    asyncio.run(_run())


@app.command
def dismiss(provider_id: str, /) -> None:
    """Never suggest this provider again.

    Args:
        provider_id: Provider to hide.
    """
    console = get_console()

    async def _run() -> None:
        async with open_session(boot=False) as shell:
            service = await shell.container.get(SuggestionService)
            if service.dismiss(provider_id):
                console.success(f"Dismissed {provider_id}")
            else:
                console.info(f"{provider_id} was already dismissed")

    asyncio.run(_run())


@app.command
def reset() -> None:
    """Show dismissed providers in suggestions again."""
    console = get_console()

    async def _run() -> None:
        async with open_session(boot=False) as shell:
            (await shell.container.get(SuggestionService)).clear_dismissed()
            console.success("Dismissed suggestions cleared")

    asyncio.run(_run())
