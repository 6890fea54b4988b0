"""Server commands."""

import asyncio
import sys

import cyclopts
import uvicorn

from cityhealth.cli.console import get_console
from cityhealth.cli.util.session import open_session
from cityhealth.config import Config
from cityhealth.domain.provider.port.provider_store import ProviderStore
from cityhealth.infrastructure.persistence.repository.provider import SqlProviderStore
from cityhealth.infrastructure.persistence.seed import seed_providers

app = cyclopts.App(name="server", help="Server management commands")


@app.command
def start(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Run the REST API in the foreground.

    Args:
        host: Host to bind to.
        port: Port to listen on.
        reload: Restart on code changes (development).
    """
    uvicorn.run(
        "cityhealth.application.api.rest.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@app.command
def seed() -> None:
    """Load the demo providers into the configured database."""
    console = get_console()
    if Config().database.url is None:  # type: ignore[call-arg]
        console.error(
            "No database configured", hint="Set CITYHEALTH_DATABASE__URL to a SQLAlchemy URL"
        )
        sys.exit(1)

    async def _run() -> None:
        async with open_session(boot=False) as shell:
            store = await shell.container.get(ProviderStore)
            if not isinstance(store, SqlProviderStore):
                console.error("The configured provider store cannot be seeded")
                sys.exit(1)
            count = await seed_providers(store)
            console.success(f"Seeded {count} providers")

    asyncio.run(_run())
