"""Open an application page the way the browser shell would."""

import asyncio

import cyclopts

from cityhealth.cli.console import get_console
from cityhealth.cli.util.session import open_session
from cityhealth.domain.auth.model.principal import Principal
from cityhealth.domain.auth.model.role import Role
from cityhealth.domain.navigation.model.viewport import NavigationState, Viewport
from cityhealth.domain.provider.listener.profile_loader import LoadProfile
from cityhealth.domain.search.listener.search_page import SearchPage
from cityhealth.domain.suggestion.listener.suggestions_panel import SuggestionsPanel
from cityhealth.infrastructure.auth.session import SessionIdentityProvider

PROFILE_COLUMNS: list[tuple[str, str]] = [
    ("name", "Name"),
    ("specialty", "Specialty"),
    ("city", "City"),
    ("phone", "Phone"),
    ("view_count", "Views"),
]

app = cyclopts.App(name="open", help="Render an application page")


@app.default
def open_page(
    path: str = "/",
    /,
    *,
    user: str | None = None,
    role: str = "citizen",
    language: str | None = None,
) -> None:
    """Navigate to a path and print what the page shows.

    Args:
        path: Application path, e.g. "/search?type=doctor&location=Oran".
        user: Sign in as this user id before navigating.
        role: Role of the signed-in user (citizen, provider, admin).
        language: Preferred language (Accept-Language style).
    """
    console = get_console()

    async def _run() -> None:
        async with open_session(boot=False) as shell:
            if user:
                session = await shell.container.get(SessionIdentityProvider)
                session.sign_in(Principal(user_id=user, roles=frozenset({Role[role.upper()]})))

            navigation = await shell.start(path, accept_language=language)
            viewport = await shell.container.get(Viewport)

            if navigation.current_path != path and navigation.state is NavigationState.READY:
                console.info(f"Redirected to {navigation.current_path}")
            console.panel(
                viewport.content.strip(),
                title=f"[bold]{viewport.path}[/bold]",
                subtitle=navigation.state.value,
                border_style="red" if navigation.state is NavigationState.ERROR else "blue",
            )

            view = shell.listener(SearchPage).view
            if view is not None and viewport.path == navigation.current_path:
                if view.message:
                    console.warning(view.message)
                if view.result is not None:
                    console.search_result(view.result)

            items = shell.listener(SuggestionsPanel).items
            if items is not None:
                console.suggestions(items)

            profile = shell.listener(LoadProfile).profile
            if profile is not None:
                console.table([profile], PROFILE_COLUMNS)

    asyncio.run(_run())
