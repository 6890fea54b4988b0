"""Search commands."""

import asyncio
import sys

import cyclopts
from pydantic import ValidationError as PydanticValidationError

from cityhealth.cli.console import get_console
from cityhealth.cli.util.session import open_session
from cityhealth.domain.i18n.service.messages import error_message_key
from cityhealth.domain.i18n.service.translator import Translator
from cityhealth.domain.search.model.value import SearchRequest
from cityhealth.domain.search.service.search import SearchService
from cityhealth.domain.shared.error import CityHealthError

app = cyclopts.App(name="search", help="Search verified providers")


@app.default
def search(
    query: str = "",
    /,
    *,
    type: str | None = None,
    location: str | None = None,
    filter: list[str] | None = None,
    page: int = 1,
    fields: list[str] | None = None,
) -> None:
    """Search providers, best rated first.

    Args:
        query: Free text matched against names, specialty and address.
        type: clinic, hospital, doctor, pharmacy or lab.
        location: City name.
        filter: accessibility, home_visits or available_24_7 (repeatable).
        page: Page number; earlier pages are fetched as needed.
        fields: Only return these fields (repeatable).
    """
    console = get_console()
    try:
        request = SearchRequest(
            query=query,
            service_type=type,
            location=location,
            filters=frozenset(filter or []),
            fields=fields,
            page=page,
        )
    except PydanticValidationError as e:
        console.error(f"Invalid search: {e.errors()[0]['msg']}")
        sys.exit(1)

    async def _run() -> None:
        async with open_session() as shell:
            service = await shell.container.get(SearchService)
            translator = await shell.container.get(Translator)
            try:
                result = await service.search(request)
            except CityHealthError as e:
                console.error(translator.t(error_message_key(e)), hint=e.message)
                sys.exit(1)
            service.remember(request)
            console.search_result(result)

    asyncio.run(_run())


@app.command
def history(*, clear: bool = False) -> None:
    """Show (or clear) recent searches.

    Args:
        clear: Forget the search history.
    """
    console = get_console()

    async def _run() -> None:
        async with open_session(boot=False) as shell:
            service = await shell.container.get(SearchService)
            if clear:
                service.clear_history()
                console.success("Search history cleared")
                return
            console.history(service.history())

    asyncio.run(_run())
