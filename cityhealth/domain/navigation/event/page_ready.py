"""PageReady event - emitted once a page's template has been injected into the viewport."""

from cityhealth.domain.shared.event import Event


class PageReady(Event):
    """Emitted after a successful navigation renders its template.

    Listeners may rely on the page markup being in the viewport.
    """

    path: str
    pattern: str
    params: dict[str, str] = {}
    query: dict[str, str] = {}
