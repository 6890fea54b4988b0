"""Main CLI application using Cyclopts.

Commands run the application in-process: each invocation builds the DI
container, uses the same services the REST API does, and persists
client state (history, dismissed suggestions, language) under the state
directory.
"""

import cyclopts

from cityhealth.cli.commands import chat, page, search, server, suggest

app = cyclopts.App(
    name="cityhealth",
    help="CityHealth - healthcare provider directory",
)

app.command(search.app, name="search")
app.command(suggest.app, name="suggest")
app.command(suggest.dismiss, name="dismiss")
app.command(page.app, name="open")
app.command(chat.app, name="chat")
app.command(server.app, name="server")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
