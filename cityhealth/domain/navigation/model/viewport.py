"""The content container pages are rendered into."""

import html
from dataclasses import dataclass, field
from enum import StrEnum


class NavigationState(StrEnum):
    IDLE = "idle"
    RESOLVING = "resolving"
    RENDERING = "rendering"
    READY = "ready"
    ERROR = "error"


@dataclass
class Viewport:
    """Holds the markup of the page currently shown and the path it belongs to."""

    content: str = ""
    path: str | None = None
    renders: list[str] = field(default_factory=list)

    def inject(self, content: str, path: str) -> None:
        self.content = content
        self.path = path
        self.renders.append(path)


def not_found_view(path: str, title: str, message: str, home_label: str) -> str:
    """Generic not-found markup with a link back to the root path."""
    return (
        '<div class="container text-center py-5">\n'
        f"  <h1>{html.escape(title)}</h1>\n"
        f"  <p>{html.escape(message)}</p>\n"
        f'  <p class="text-muted">{html.escape(path)}</p>\n'
        f'  <a href="/" data-route class="btn btn-primary">{html.escape(home_label)}</a>\n'
        "</div>\n"
    )
