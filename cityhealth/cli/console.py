"""Console output for the CLI.

Wraps rich so every command prints messages, tables and panels the same way.
"""

import time
from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from cityhealth.domain.chatbot.model.value import ChatbotResponse
from cityhealth.domain.search.model.value import HistoryEntry, SearchResult
from cityhealth.domain.suggestion.model.value import SuggestionItem

PROVIDER_COLUMNS: list[tuple[str, str]] = [
    ("id", "ID"),
    ("name", "Name"),
    ("type", "Type"),
    ("city", "City"),
    ("rating", "Rating"),
]


def relative_time(timestamp: float, now: float | None = None) -> str:
    """Render an epoch timestamp as '2 hours ago'."""
    seconds = (now if now is not None else time.time()) - timestamp
    if seconds < 60:
        return "just now"
    elif seconds < 3600:
        mins = int(seconds // 60)
        return f"{mins} minute{'s' if mins != 1 else ''} ago"
    elif seconds < 86400:
        hours = int(seconds // 3600)
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    elif seconds < 604800:
        days = int(seconds // 86400)
        return f"{days} day{'s' if days != 1 else ''} ago"
    return time.strftime("%Y-%m-%d %H:%M", time.localtime(timestamp))


class Console:
    """CLI output manager wrapping rich."""

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
        quiet: bool = False,
    ) -> None:
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)
        self._quiet = quiet

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def success(self, message: str) -> None:
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {message}")

    def info(self, message: str) -> None:
        """Print an info message (suppressed in quiet mode)."""
        if not self._quiet:
            self._console.print(f"[dim]{message}[/dim]")

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)

    # -------------------------------------------------------------------------
    # Structured output
    # -------------------------------------------------------------------------

    def table(
        self,
        rows: list[dict[str, Any]],
        columns: list[tuple[str, str]],  # (key, header)
        *,
        title: str | None = None,
        numbered: bool = False,
    ) -> None:
        table = Table(title=title, show_header=True, header_style="bold")

        if numbered:
            table.add_column("#", style="dim", width=3)
        for _, header in columns:
            table.add_column(header)

        for i, row in enumerate(rows, 1):
            values = [str(row.get(key, "") or "") for key, _ in columns]
            if numbered:
                table.add_row(str(i), *values)
            else:
                table.add_row(*values)

        self._console.print(table)

    def panel(
        self,
        content: str,
        *,
        title: str | None = None,
        subtitle: str | None = None,
        border_style: str = "dim",
    ) -> None:
        self._console.print(
            Panel(content, title=title, subtitle=subtitle, border_style=border_style)
        )

    # -------------------------------------------------------------------------
    # Domain views
    # -------------------------------------------------------------------------

    def search_result(self, result: SearchResult) -> None:
        if not result.providers:
            self.warning(f"No providers found on page {result.page}")
            return
        self.table(
            result.providers,
            PROVIDER_COLUMNS,
            title=f"Page {result.page} ({result.total} providers, {result.query_time_ms:.1f} ms)",
        )
        if result.has_more:
            self.info(f"More results: --page {result.page + 1}")

    def history(self, entries: list[HistoryEntry]) -> None:
        if not entries:
            self.info("No recent searches")
            return
        rows = [
            {
                "query": e.query,
                "type": e.service_type or "all",
                "location": e.location or "all",
                "when": relative_time(e.timestamp),
            }
            for e in entries
        ]
        self.table(
            rows,
            [("query", "Query"), ("type", "Type"), ("location", "Location"), ("when", "When")],
            numbered=True,
        )

    def suggestions(self, items: list[SuggestionItem]) -> None:
        if not items:
            self.warning("No suggestions right now")
            return
        rows = [{**item.provider, "reason": item.reason.value} for item in items]
        self.table(rows, PROVIDER_COLUMNS + [("reason", "Why")], title="Suggested for you")

    def chatbot_reply(self, response: ChatbotResponse) -> None:
        style = "red" if response.error else "blue"
        self.panel(response.text, title=f"[bold]{response.intent.value}[/bold]", border_style=style)
        if response.providers:
            self.table(response.providers, PROVIDER_COLUMNS, numbered=True)
        for reply in response.suggestions:
            self.info(f"• {reply.text}")

    def status(self, message: str):
        """Return a status context manager for long operations."""
        return self._console.status(message)


# Module-level default instance for convenience
_default: Console | None = None


def get_console() -> Console:
    global _default
    if _default is None:
        _default = Console()
    return _default
